"""Command-line entry point — wires services and resolves one game's itch.io metadata."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from itchmeta.config import Config, get_config
from itchmeta.core.provider import ItchioMetadataProvider
from itchmeta.logger import setup_logger
from itchmeta.models.metadata import Link
from itchmeta.models.request import GameData, MetadataRequestOptions
from itchmeta.plugin import ItchioMetadataPlugin


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch game metadata from itch.io")
    parser.add_argument("name", nargs="?", default="", help="game name to search for")
    parser.add_argument("--url", action="append", default=[], help="known itch.io page URL")
    parser.add_argument("--game-id", default="", help="library game id")
    parser.add_argument("--source", default="", help="library source name, e.g. itch.io")
    parser.add_argument("--description", default="", help="existing description")
    parser.add_argument("--interactive", action="store_true", help="pick between results in a dialog")
    parser.add_argument("--config-dir", type=Path, default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def create_plugin(config: Config, interactive: bool) -> ItchioMetadataPlugin:
    """Wire the plugin; the Qt chooser is only loaded for interactive runs."""
    chooser = None
    if interactive:
        from PySide6.QtWidgets import QApplication

        from itchmeta.ui.candidate_dialog import QtCandidateChooser

        QApplication.instance() or QApplication(sys.argv)
        chooser = QtCandidateChooser()
    return ItchioMetadataPlugin(config, chooser=chooser)


def provider_to_dict(provider: ItchioMetadataProvider) -> dict:
    release = provider.get_release_date()
    return {
        "available_fields": [str(f) for f in provider.available_fields],
        "name": provider.get_name(),
        "description": provider.get_description(),
        "developers": provider.get_developers(),
        "publishers": provider.get_publishers(),
        "genres": provider.get_genres(),
        "tags": provider.get_tags(),
        "release_date": release.isoformat() if release else None,
        "cover_image": provider.get_cover_image(),
        "background_image": provider.get_background_image(),
        "screenshots": provider.get_screenshots(),
        "links": [{"name": link.name, "url": link.url} for link in provider.get_links() or []],
        "community_score": provider.get_community_score(),
    }


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = Config(args.config_dir) if args.config_dir else get_config()
    setup_logger(config.config_dir / "logs", verbose=args.verbose)

    options = MetadataRequestOptions(
        game_data=GameData(
            name=args.name,
            game_id=args.game_id,
            description=args.description,
            source=args.source,
            links=[Link("itch.io", url) for url in args.url],
        ),
        is_background_download=not args.interactive,
    )
    plugin = create_plugin(config, args.interactive)
    provider = plugin.get_metadata_provider(options)

    result = provider_to_dict(provider)
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0 if result["available_fields"] else 1


if __name__ == "__main__":
    sys.exit(main())
