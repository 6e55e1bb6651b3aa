"""CLI entry point for the weather lookup utility."""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from skyview.app import WeatherApp
from skyview.config.loader import load_config, redacted
from skyview.config.schema import AppConfig
from skyview.ingest.formatters import MalformedPayloadError
from skyview.ingest.geolocation import GeolocationError, StaticLocationProvider
from skyview.ingest.owm_client import OpenWeatherClient, WeatherProviderError
from skyview.models.preferences import Theme, Unit
from skyview.reporting.formatters import (
    format_current_text,
    format_favorites_text,
    format_forecast_text,
    format_stats_json,
    format_suggestions_text,
)
from skyview.storage.kv_store import SqliteKeyValueStore
from skyview.storage.preference_store import PreferenceStore

DEFAULT_CONFIG = "skyview.yaml"

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skyview",
        description="Current weather and 5-day forecast lookup",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # weather
    weather_p = sub.add_parser("weather", help="Show current weather and forecast")
    weather_p.add_argument("city", nargs="?", help="City name")
    weather_p.add_argument("--lat", type=float, help="Latitude")
    weather_p.add_argument("--lon", type=float, help="Longitude")

    # search / restore
    search_p = sub.add_parser("search", help="Look up matching cities")
    search_p.add_argument("query")
    sub.add_parser("restore", help="Reload the last viewed city")

    # favorites
    fav_p = sub.add_parser("favorites", help="Favorite city operations")
    fav_sub = fav_p.add_subparsers(dest="favorites_command")
    fav_sub.add_parser("list", help="List favorite cities")
    add_p = fav_sub.add_parser("add", help="Fetch a city and pin it")
    add_p.add_argument("city")
    rm_p = fav_sub.add_parser("remove", help="Unpin a city")
    rm_p.add_argument("city")

    # theme / unit
    theme_p = sub.add_parser("theme", help="Theme preference")
    theme_sub = theme_p.add_subparsers(dest="theme_command")
    theme_sub.add_parser("show")
    theme_sub.add_parser("toggle")
    theme_set = theme_sub.add_parser("set")
    theme_set.add_argument("theme", choices=[t.value for t in Theme])

    unit_p = sub.add_parser("unit", help="Temperature unit preference")
    unit_sub = unit_p.add_subparsers(dest="unit_command")
    unit_sub.add_parser("show")
    unit_set = unit_sub.add_parser("set")
    unit_set.add_argument("unit", choices=[u.value for u in Unit])

    # maintenance
    sub.add_parser("stats", help="Show storage usage")
    sub.add_parser("export", help="Print stored preferences as JSON")
    import_p = sub.add_parser("import", help="Load preferences from a JSON file")
    import_p.add_argument("file")
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    if args.command == "config":
        return _cmd_config(config, args)

    backend = SqliteKeyValueStore.open(
        config.storage.db_path, capacity_bytes=config.storage.capacity_bytes
    )
    try:
        store = PreferenceStore(backend)
        if args.command in ("weather", "search", "restore", "favorites"):
            return asyncio.run(_run_async(config, store, args))
        elif args.command == "theme":
            return _cmd_theme(store, args)
        elif args.command == "unit":
            return _cmd_unit(store, args)
        elif args.command == "stats":
            return _cmd_stats(store)
        elif args.command == "export":
            print(json.dumps(store.export_data(), indent=2))
            return 0
        elif args.command == "import":
            return _cmd_import(store, args)
        else:
            parser.print_help()
            return 1
    finally:
        backend.close()


async def _run_async(config: AppConfig, store: PreferenceStore, args) -> int:
    async with OpenWeatherClient(
        api_key=config.api.api_key,
        base_url=config.api.base_url,
        lang=config.api.lang,
        timeout=config.api.timeout_seconds,
        forecast_days=config.forecast_days,
    ) as client:
        app = WeatherApp(client, store, config)
        app.initialize_theme()
        try:
            if args.command == "weather":
                return await _cmd_weather(app, args)
            elif args.command == "search":
                return await _cmd_search(app, args)
            elif args.command == "restore":
                return await _cmd_restore(app)
            else:
                return await _cmd_favorites(app, args)
        except (WeatherProviderError, MalformedPayloadError, GeolocationError) as e:
            logger.debug("Lookup failed", exc_info=True)
            print(f"Error: {e}")
            return 1


async def _cmd_weather(app: WeatherApp, args) -> int:
    if args.lat is not None or args.lon is not None:
        if args.lat is None or args.lon is None:
            print("Error: --lat and --lon must be given together")
            return 1
        await app.load_current_location(StaticLocationProvider(args.lat, args.lon))
    elif args.city:
        await app.load_weather(args.city.strip())
    else:
        print("Error: give a city name or --lat/--lon")
        return 1
    _print_weather(app)
    return 0


async def _cmd_search(app: WeatherApp, args) -> int:
    app.search(args.query)
    # Wait out the debounce window, then for the search it fired.
    await asyncio.sleep(app.searcher.delay)
    while app.searcher.pending:
        await asyncio.sleep(0.01)
    await app.searcher.drain()
    print(format_suggestions_text(app.state.suggestions))
    return 0


async def _cmd_restore(app: WeatherApp) -> int:
    weather = await app.restore_last_city()
    if weather is None:
        print("No last city saved")
        return 1
    _print_weather(app)
    return 0


async def _cmd_favorites(app: WeatherApp, args) -> int:
    store = app.store
    if args.favorites_command == "list":
        print(format_favorites_text(store.get_favorite_cities(), store.get_unit()))
        return 0
    elif args.favorites_command == "add":
        if store.is_favorite_city(args.city):
            print(f"{args.city} is already a favorite")
            return 1
        weather = await app.load_weather(args.city.strip())
        if store.is_favorite_city(weather.city):
            print(f"{weather.city} is already a favorite")
            return 1
        if not app.toggle_favorite():
            print(f"Could not save {weather.city} as a favorite")
            return 1
        print(f"Added {weather.city}, {weather.country} to favorites")
        return 0
    elif args.favorites_command == "remove":
        if not store.is_favorite_city(args.city):
            print(f"{args.city} is not a favorite")
            return 1
        store.remove_favorite_city(args.city)
        print(f"Removed {args.city} from favorites")
        return 0
    else:
        print("Use: favorites list | add CITY | remove CITY")
        return 1


def _print_weather(app: WeatherApp) -> None:
    unit = app.store.get_unit()
    weather = app.state.current
    assert weather is not None
    star = " *" if app.store.is_favorite_city(weather.city) else ""
    print(format_current_text(weather, unit) + star)
    print()
    print(format_forecast_text(app.state.forecast, unit, weather.utc_offset))


def _cmd_theme(store: PreferenceStore, args) -> int:
    if args.theme_command == "show":
        theme = store.get_theme()
        print(f"Theme: {theme.value if theme else 'unset'}")
        return 0
    elif args.theme_command == "toggle":
        current = store.get_theme() or Theme.LIGHT
        new = Theme.DARK if current == Theme.LIGHT else Theme.LIGHT
        store.save_theme(new)
        print(f"Theme: {new.value}")
        return 0
    elif args.theme_command == "set":
        store.save_theme(args.theme)
        print(f"Theme: {args.theme}")
        return 0
    else:
        print("Use: theme show | toggle | set {light,dark}")
        return 1


def _cmd_unit(store: PreferenceStore, args) -> int:
    if args.unit_command == "show":
        print(f"Unit: {store.get_unit().value}")
        return 0
    elif args.unit_command == "set":
        if not store.save_unit(args.unit):
            print("Error: could not save unit")
            return 1
        print(f"Unit: {args.unit}")
        return 0
    else:
        print("Use: unit show | set {celsius,fahrenheit}")
        return 1


def _cmd_stats(store: PreferenceStore) -> int:
    stats = store.storage_stats()
    if stats is None:
        print("Error: storage unavailable")
        return 1
    print(format_stats_json(stats))
    return 0


def _cmd_import(store: PreferenceStore, args) -> int:
    path = Path(args.file)
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    if not isinstance(data, dict):
        print("Error: expected a JSON object")
        return 1
    ok = store.import_data(data)
    print("Imported preferences" if ok else "Imported with errors")
    return 0 if ok else 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(redacted(config))
        return 0
    print("Use: config show")
    return 1
