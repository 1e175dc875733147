"""Launcher: builds the adapters from config and runs the bot."""

import asyncio
import sys
from typing import Optional

from fediring.adapters.git.repository import GitRepository
from fediring.adapters.mastodon.client import MastodonClient
from fediring.adapters.mastodon.runner import MastodonRunner
from fediring.adapters.profiles.csv_profiles import CsvProfileStorage
from fediring.adapters.storage.json_store import JsonStateStore
from fediring.adapters.templates.renderer import JinjaTemplateRenderer
from fediring.bot import FediringBot
from fediring.config import AppConfig


def _log(msg: str):
    print(msg, file=sys.stderr)


def build_runner(config: AppConfig) -> MastodonRunner:
    """Instantiate every adapter and the bot, and return the polling runner."""
    repo = GitRepository(
        repo_url=config.git.repo_url,
        data_path=config.data_path,
        clone_dirname=config.git.clone_dirname,
        git=config.git.command_path,
        timeout=config.git.command_timeout,
    )
    state = JsonStateStore(storage_dir=config.data_path)
    client = MastodonClient(config.mastodon.base_url, config.mastodon.access_token)
    bot = FediringBot(
        config=config,
        profiles=CsvProfileStorage(repo, profiles_path=config.git.profiles_path),
        state=state,
        templates=JinjaTemplateRenderer(config.templates_path),
        status=client,
        repo=repo,
    )
    return MastodonRunner(
        client=client,
        state=state,
        on_mention=bot.on_mention,
        on_interval=bot.on_interval,
        poll_interval=config.mastodon.poll_interval_seconds,
    )


async def launch(config: Optional[AppConfig] = None) -> None:
    config = config or AppConfig.from_env()
    if not config.mastodon.is_configured:
        _log("Mastodon not configured. Set MASTODON_BASE_URL and MASTODON_ACCESS_TOKEN.")
        return
    if not config.git.repo_url:
        _log("GIT_REPO_URL not set.")
        return
    if not config.admin_accounts:
        _log("ADMIN_ACCOUNTS not set, every membership change will be deferred")

    runner = build_runner(config)
    _log(f"Launching fediring manager for {config.mastodon.base_url}...")
    await runner.run()


def main() -> None:
    try:
        asyncio.run(launch())
    except KeyboardInterrupt:
        _log("Stopped.")


if __name__ == "__main__":
    main()
