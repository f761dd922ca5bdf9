from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from finance.profit import store_daily_summary, format_currency


class Command(BaseCommand):
    help = "Compute and store the profit summary of a day (default: today)"

    def add_arguments(self, parser):
        parser.add_argument('--date', help="Day to close, YYYY-MM-DD")
        parser.add_argument('--yesterday', action='store_true', help="Close yesterday instead of today")

    def handle(self, *args, **options):
        if options['date'] and options['yesterday']:
            raise CommandError("Use either --date or --yesterday, not both")

        day = timezone.localdate()
        if options['yesterday']:
            day -= timedelta(days=1)
        elif options['date']:
            day = parse_date(options['date'])
            if day is None:
                raise CommandError(f"Invalid date '{options['date']}', expected YYYY-MM-DD")

        summary = store_daily_summary(day)
        self.stdout.write(self.style.SUCCESS(
            f"{summary.date}: {summary.total_orders} orders, "
            f"revenue {format_currency(summary.total_revenue)}, "
            f"expenses {format_currency(summary.total_expenses)}, "
            f"net {format_currency(summary.net_profit)}"
        ))
