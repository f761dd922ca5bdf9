from django.utils.functional import SimpleLazyObject

from .snapshot import TodayOrdersSnapshot


class TodayOrdersMiddleware:
    """
    Attach today's orders snapshot to every request as ``request.today_orders``.

    The snapshot is resolved lazily, so requests that never read it do not
    touch the cache or the database.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.today_orders = SimpleLazyObject(TodayOrdersSnapshot.get)
        return self.get_response(request)
