# peso_tracker/cli.py
import logging
import os
from datetime import date

import click
import yaml

from peso_tracker.aggregate import sum_in_range
from peso_tracker.config import load_config
from peso_tracker.core.models import RecordKind
from peso_tracker.core.progress import installment_progress, savings_progress
from peso_tracker.core.sources import expand_sources
from peso_tracker.expander import expand_month, occurrence_calendar
from peso_tracker.outputs import get_output
from peso_tracker.periods import PeriodPolicy, period_summary
from peso_tracker.reports import category_breakdown, forecast_report, group_by_date
from peso_tracker.store import load_state, records_of
from peso_tracker.utils import parse_month, sort_transactions

# -----------------------------------------------------------------------------
# Log level comes from the environment (caller can override)
# -----------------------------------------------------------------------------
logging.basicConfig(level=os.getenv("PESIFY_LOG_LEVEL", "WARNING").upper())
logger = logging.getLogger(__name__)


class _DateType(click.ParamType):
    name = "date"

    def convert(self, value, param, ctx):
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(value)
        except ValueError:
            self.fail(f"{value!r} is not a YYYY-MM-DD date", param, ctx)


class _MonthType(click.ParamType):
    name = "month"

    def convert(self, value, param, ctx):
        try:
            return parse_month(value)
        except ValueError:
            self.fail(f"{value!r} is not a YYYY-MM month", param, ctx)


DATE = _DateType()
MONTH = _MonthType()


def _money(ctx, amount):
    symbol = ctx.obj['config'].get('currency_symbol', '$')
    return f"{symbol} {amount:,.2f}"


def _load(ctx, state_path):
    path = state_path or ctx.obj['config'].get('state_file')
    try:
        return load_state(path)
    except FileNotFoundError as e:
        raise click.ClickException(f"State file not found: {path}") from e
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Error loading state from {path}: {e}") from e


def _selected(state, kinds):
    return records_of(state, kinds or [k.value for k in RecordKind])


state_option = click.option(
    '--state', 'state_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Saved app state (JSON export or YAML). Defaults to state_file from the config.'
)

kind_option = click.option(
    '--kind', 'kinds',
    multiple=True,
    type=click.Choice([k.value for k in RecordKind]),
    help='Only include these kinds of record (repeatable; default: all)'
)


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to config.yaml'
)
@click.pass_context
def main(ctx, config_path):
    """
    Project income, expenses and savings from one-time and recurring
    records: range totals, itemized months, the current pay period and
    next month's forecast.
    """
    ctx.ensure_object(dict)
    try:
        ctx.obj['config'] = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Error loading config from {config_path}: {e}") from e


@main.command('range')
@state_option
@click.option('--start', required=True, type=DATE, help='First day (inclusive), YYYY-MM-DD')
@click.option('--end', required=True, type=DATE, help='Last day (inclusive), YYYY-MM-DD')
@click.pass_context
def range_cmd(ctx, state_path, start, end):
    """Total each kind of record between two dates."""
    state = _load(ctx, state_path)
    income = sum_in_range(state.income_records, start, end)
    expense = sum_in_range(state.expense_records, start, end)
    saving = sum_in_range(state.saving_records, start, end)
    click.echo(f"Range {start.isoformat()} .. {end.isoformat()}")
    click.echo(f"  Income:  {_money(ctx, income)}")
    click.echo(f"  Expense: {_money(ctx, expense)}")
    click.echo(f"  Savings: {_money(ctx, saving)}")
    click.echo(f"  Net:     {_money(ctx, income - expense)}")


@main.command('month')
@state_option
@kind_option
@click.option('--month', 'month', required=True, type=MONTH, help='Month to list, YYYY-MM')
@click.option(
    '--order',
    default='asc',
    type=click.Choice(['asc', 'desc']),
    help='Date order of the listing'
)
@click.option(
    '--output', 'output_format',
    default=None,
    type=click.Choice(['csv', 'excel']),
    help='Also export the rows to csv or excel'
)
@click.pass_context
def month_cmd(ctx, state_path, kinds, month, order, output_format):
    """List every occurrence in a month."""
    state = _load(ctx, state_path)
    year, month_num = month
    label = f"{year}-{month_num:02d}"
    rows = expand_month(_selected(state, kinds), year, month_num)

    for tx in sort_transactions(rows, descending=(order == 'desc')):
        click.echo(
            f"{tx.date.isoformat()}  {tx.kind.value:<7}  {tx.name} "
            f"[{tx.category}]  {_money(ctx, tx.amount)}"
        )
    click.echo(f"{len(rows)} transaction(s) in {label}.")

    if output_format:
        outputter = get_output(output_format, ctx.obj['config'])
        outputter.append(rows, month=label)


@main.command('summary')
@state_option
@click.option('--today', default=None, type=DATE, help='Reference day (default: today)')
@click.option(
    '--policy',
    default=None,
    type=click.Choice([p.value for p in PeriodPolicy]),
    help='Current period boundaries (default: period_policy from the config)'
)
@click.pass_context
def summary_cmd(ctx, state_path, today, policy):
    """Dashboard figures for the current period."""
    state = _load(ctx, state_path)
    today = today or date.today()
    policy = policy or ctx.obj['config'].get('period_policy', PeriodPolicy.PAYDATE.value)
    try:
        policy = PeriodPolicy(policy)
    except ValueError as e:
        raise click.ClickException(f"Unknown period policy: {policy}") from e
    summary = period_summary(state.income_records, state.expense_records, today, policy)

    click.echo(
        f"Period ({summary.frequency.value}): "
        f"{summary.start.isoformat()} .. {summary.end.isoformat()}"
    )
    click.echo(f"  Income:     {_money(ctx, summary.income)}")
    click.echo(f"  Expense:    {_money(ctx, summary.expense)}")
    click.echo(f"  Net:        {_money(ctx, summary.net)}")
    click.echo(f"  Carry-over: {_money(ctx, summary.carry_over)}")
    click.echo(f"  Remaining:  {_money(ctx, summary.remaining)}")
    click.echo(f"  Month income:  {_money(ctx, summary.monthly_income)}")
    click.echo(f"  Month expense: {_money(ctx, summary.monthly_expense)}")


def _change(value):
    if value is None:
        return "n/a"
    arrow = "▲" if value >= 0 else "▼"
    return f"{arrow} {value:.1f}%"


@main.command('forecast')
@state_option
@click.option('--today', default=None, type=DATE, help='Reference day (default: today)')
@click.pass_context
def forecast_cmd(ctx, state_path, today):
    """Project next month and compare it with the current one."""
    state = _load(ctx, state_path)
    report = forecast_report(state.income_records, state.expense_records, today or date.today())
    forecast = report.forecast

    click.echo(f"Forecast for {forecast.year}-{forecast.month:02d}")
    click.echo(f"  Income:   {_money(ctx, forecast.income)} ({_change(report.income_change)})")
    click.echo(f"  Expense:  {_money(ctx, forecast.expense)} ({_change(report.expense_change)})")
    click.echo(f"  Balance:  {_money(ctx, forecast.balance)}")
    click.echo(f"  Recurring income: {_money(ctx, forecast.recurring_income)}")
    click.echo(f"  Fixed expense:    {_money(ctx, forecast.fixed_expense)}")
    click.echo(f"  Variable expense: {_money(ctx, forecast.variable_expense)}")

    breakdown = category_breakdown(forecast.rows, RecordKind.EXPENSE)
    if breakdown:
        click.echo("Expenses by category:")
        for category, total in breakdown:
            click.echo(f"  {category}: {_money(ctx, total)}")

    for day, rows in group_by_date(forecast.rows):
        click.echo(day.isoformat())
        for tx in rows:
            click.echo(f"  {tx.kind.value:<7}  {tx.name}  {_money(ctx, tx.amount)}")


@main.command('calendar')
@state_option
@kind_option
@click.option('--month', 'month', required=True, type=MONTH, help='Month to mark, YYYY-MM')
@click.pass_context
def calendar_cmd(ctx, state_path, kinds, month):
    """Mark the days of a month that have income, expense or savings."""
    state = _load(ctx, state_path)
    year, month_num = month
    marks = occurrence_calendar(_selected(state, kinds), year, month_num)
    for day in sorted(marks):
        flags = [kind for kind, present in marks[day].items() if present]
        click.echo(f"{day.isoformat()}  {', '.join(flags)}")


@main.command('progress')
@state_option
@click.pass_context
def progress_cmd(ctx, state_path):
    """Show installment plans and savings goals."""
    state = _load(ctx, state_path)

    plans = []
    for record in state.expense_records:
        for source in expand_sources(record):
            progress = installment_progress(source)
            if progress is not None:
                plans.append((source, progress))
    goals = [(r, savings_progress(r)) for r in state.saving_records]
    goals = [(r, p) for r, p in goals if p is not None]

    if not plans and not goals:
        click.echo("No installment plans or savings goals.")
        return

    if plans:
        click.echo("Installments:")
    for source, p in plans:
        line = (
            f"  {source.name}: {p.installments_paid:g}/{p.duration_in_months:g} paid, "
            f"{_money(ctx, p.amount_paid)}"
        )
        if p.percent is not None:
            line += f" of {_money(ctx, p.total_amount)} ({p.percent:.0f}%)"
        line += " (completed)" if p.completed else f", {p.months_remaining:g} month(s) left"
        click.echo(line)

    if goals:
        click.echo("Savings goals:")
    for record, p in goals:
        click.echo(
            f"  {record.name}: {_money(ctx, p.saved)} of {_money(ctx, p.goal)} "
            f"({p.percent:.0f}%), {_money(ctx, p.remaining)} to go"
        )


if __name__ == '__main__':
    main()
