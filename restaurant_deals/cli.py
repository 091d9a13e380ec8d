"""
Command-line interface for restaurant deals.
Provides commands for active-deal lookup, peak window, database sync and serving the API.
"""

import asyncio
import logging

import click

from .integrations.feed_client import FeedError
from .mapper import MalformedFeedValue
from .service import DealService
from .util.time_utils import InvalidTimeFormat, format_clock, parse_clock
from .windows import MalformedWindowError, MissingBusinessHoursError


logger = logging.getLogger(__name__)


@click.group()
@click.option('--config', default='config/params.yaml', help='Configuration file path')
@click.option('--source', type=click.Choice(['feed', 'database']), default=None,
              help='Override where restaurants are read from')
@click.option('--feed-url', default=None, help='Override the feed URL')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def main(ctx, config: str, source: str, feed_url: str, verbose: bool):
    """Restaurant Deals CLI."""
    # Setup logging
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Store config in context
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    overrides = {}
    if source:
        overrides['feed.source'] = source
    if feed_url:
        overrides['feed.url'] = feed_url
    ctx.obj['overrides'] = overrides


def _build_service(ctx) -> DealService:
    service = DealService(ctx.obj['config_path'])
    service.apply_overrides(ctx.obj['overrides'])  # CLI > env > YAML
    return service


@main.command()
@click.option('--time', 'time_of_day', required=True, help='Time of day, e.g. "3:00pm"')
@click.pass_context
def deals(ctx, time_of_day: str):
    """List deals active at a time of day."""
    try:
        t = parse_clock(time_of_day)
    except InvalidTimeFormat as e:
        raise click.BadParameter(str(e), param_hint='--time')
    if t is None:
        raise click.BadParameter('must not be blank', param_hint='--time')

    async def _deals():
        service = _build_service(ctx)
        try:
            results = await service.find_active_deals(t)

            click.echo(f"Active deals at {format_clock(t)}: {len(results)}")
            for d in results:
                flags = []
                if d.dine_in:
                    flags.append("dine-in")
                if d.lightning:
                    flags.append("lightning")
                flag_text = f" [{', '.join(flags)}]" if flags else ""
                click.echo(
                    f"  {d.restaurant_name} ({d.restaurant_suburb}) - "
                    f"{d.discount}% off, {d.qty_left} left{flag_text}"
                )

        except (FeedError, MalformedFeedValue, MalformedWindowError, MissingBusinessHoursError,
                InvalidTimeFormat) as e:
            logger.error(f"Active deal lookup failed: {e}")
            raise click.ClickException(str(e))
        finally:
            await service.close()

    asyncio.run(_deals())


@main.command()
@click.pass_context
def peak(ctx):
    """Show the window with the most deals available at once."""

    async def _peak():
        service = _build_service(ctx)
        try:
            result = await service.calculate_peak_time()
            if result.count == 0:
                click.echo("No deals found")
                return
            click.echo(
                f"Peak: {format_clock(result.start)} - {format_clock(result.end)} "
                f"({result.count} deals)"
            )
        except (FeedError, MalformedFeedValue, MalformedWindowError, InvalidTimeFormat) as e:
            logger.error(f"Peak time calculation failed: {e}")
            raise click.ClickException(str(e))
        finally:
            await service.close()

    asyncio.run(_peak())


@main.command()
@click.pass_context
def sync(ctx):
    """Fetch the feed and save it to the database."""

    async def _sync():
        service = _build_service(ctx)
        try:
            stats = await service.sync_database()

            click.echo(f"Sync completed:")
            click.echo(f"  Restaurants saved: {stats.restaurants_saved}")
            click.echo(f"  Restaurants replaced: {stats.restaurants_replaced}")
            click.echo(f"  Deals saved: {stats.deals_saved}")
            click.echo(f"  Suburbs created: {stats.suburbs_created}")
            click.echo(f"  Cuisines created: {stats.cuisines_created}")

        except (FeedError, MalformedFeedValue, MalformedWindowError, InvalidTimeFormat) as e:
            logger.error(f"Sync failed: {e}")
            raise click.ClickException(str(e))
        finally:
            await service.close()

    asyncio.run(_sync())


@main.command()
@click.option('--host', default='127.0.0.1', help='Bind address')
@click.option('--port', default=8000, type=int, help='Port')
def serve(host: str, port: int):
    """Run the HTTP API."""
    import uvicorn
    uvicorn.run("restaurant_deals.api:app", host=host, port=port)


if __name__ == '__main__':
    main()
