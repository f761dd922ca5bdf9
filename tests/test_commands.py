from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from finance.models import DailySummary
from inventory.management.commands.seed_menu import INITIAL_MENU
from inventory.models import MenuItem

pytestmark = pytest.mark.django_db


def run(*args):
    out = StringIO()
    call_command(*args, stdout=out)
    return out.getvalue()


def test_seed_menu_loads_every_item():
    output = run('seed_menu')

    assert MenuItem.objects.count() == len(INITIAL_MENU)
    assert MenuItem.objects.filter(is_active=False).count() == 0
    assert f"Added {len(INITIAL_MENU)} menu items" in output


def test_seed_menu_is_idempotent_and_keeps_edits():
    run('seed_menu')
    MenuItem.objects.filter(name='Raita').update(price='15.00')

    output = run('seed_menu')

    assert MenuItem.objects.count() == len(INITIAL_MENU)
    assert str(MenuItem.objects.get(name='Raita').price) == '15.00'
    assert f"Added 0 menu items ({len(INITIAL_MENU)} already present" in output


def test_seed_menu_inactive():
    run('seed_menu', '--inactive')
    assert not MenuItem.objects.active().exists()


def test_close_day_today(make_order, make_expense):
    make_order(1500)
    make_expense(400)

    output = run('close_day')

    summary = DailySummary.objects.get(date=timezone.localdate())
    assert str(summary.net_profit) == '1100.00'
    assert 'revenue ₹1,500' in output


def test_close_day_yesterday(make_order, days_ago):
    make_order(250, when=days_ago(1))

    run('close_day', '--yesterday')

    summary = DailySummary.objects.get()
    assert summary.date == days_ago(1).date()
    assert summary.total_orders == 1


def test_close_day_rejects_bad_date():
    with pytest.raises(CommandError):
        run('close_day', '--date', 'not-a-date')


def test_close_day_rejects_conflicting_options():
    with pytest.raises(CommandError):
        run('close_day', '--date', '2024-01-01', '--yesterday')
