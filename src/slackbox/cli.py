"""Command line interface for the watermark store."""

import sys
from pathlib import Path
from typing import NoReturn

import click

from slackbox.config import Config, load_config
from slackbox.exceptions import SlackboxError
from slackbox.logging import setup_logging
from slackbox.models import AcknowledgedConversation, Conversation
from slackbox.store import WatermarkStore
from slackbox.sync import SnapshotFileSource, paginate, sync_and_list_unacked


def open_store(ctx: click.Context) -> WatermarkStore:
    """Open the store named by the loaded config, exiting on failure."""
    config: Config = ctx.obj["config"]
    try:
        return WatermarkStore(config.store.db_path)
    except SlackboxError as e:
        fail(f"Error opening store at {config.store.db_path}: {e}")


def fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


def print_unacked(conversations: list[AcknowledgedConversation], page: int, page_size: int) -> None:
    """Print one page of the unread list."""
    if not conversations:
        click.echo("Nothing unread.")
        return

    start = page * page_size
    shown = paginate(conversations, page, page_size)
    for i, uc in enumerate(shown, start=start + 1):
        marker = "+" if not uc.acknowledged_through_ts else "~"
        click.echo(f"{i}: {marker} {uc.display_name} ({uc.id}) {uc.latest_msg_ts}")

    total_pages = (len(conversations) + page_size - 1) // page_size
    click.echo(f"\nPage {page + 1}/{total_pages}, {len(conversations)} unread")


def print_conversation(conversation: Conversation) -> None:
    click.echo(f"ID: {conversation.id}")
    click.echo(f"Type: {conversation.conversation_type}")
    click.echo(f"Name: {conversation.display_name}")
    click.echo(f"Latest: {conversation.latest_msg_ts or '-'}")


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Path to config YAML")
@click.option("--db", "db_path", type=click.Path(path_type=Path), help="Override database path")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, db_path: Path | None) -> None:
    """Track unread conversations and acknowledge them."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        fail(f"Invalid config: {e}")
    if db_path is not None:
        config.store.db_path = db_path
    setup_logging(
        "cli",
        log_dir=config.logging.log_dir,
        level=config.logging.level_number,
        console=False,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("snapshot_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def sync(ctx: click.Context, snapshot_file: Path) -> None:
    """Apply conversation snapshots from a JSON or YAML file."""
    config: Config = ctx.obj["config"]
    with open_store(ctx) as store:
        try:
            unacked = sync_and_list_unacked(SnapshotFileSource(snapshot_file), store)
        except (SlackboxError, ValueError, OSError) as e:
            fail(f"Error syncing {snapshot_file}: {e}")
        print_unacked(unacked, 0, config.display.page_size)


@cli.command()
@click.option("--page", "-p", default=1, help="Page number, starting at 1")
@click.pass_context
def unread(ctx: click.Context, page: int) -> None:
    """List conversations with unread messages."""
    config: Config = ctx.obj["config"]
    if page < 1:
        fail("Page must be 1 or greater")
    with open_store(ctx) as store:
        try:
            unacked = store.list_unacknowledged()
        except SlackboxError as e:
            fail(f"Error listing conversations: {e}")
        page_size = config.display.page_size
        total_pages = (len(unacked) + page_size - 1) // page_size
        if unacked and page > total_pages:
            fail(f"Page {page} is out of range, there are {total_pages} pages")
        print_unacked(unacked, page - 1, page_size)


@cli.command()
@click.argument("conversation_id")
@click.pass_context
def show(ctx: click.Context, conversation_id: str) -> None:
    """Show one tracked conversation and its watermarks."""
    with open_store(ctx) as store:
        try:
            conversation = store.get(conversation_id)
            acks = store.acknowledgements.list_for(conversation_id)
        except SlackboxError as e:
            fail(f"Error reading conversation: {e}")
        if conversation is None:
            fail(f"Conversation not found: {conversation_id}")
        print_conversation(conversation)
        for ack in acks:
            click.echo(f"Acknowledged through: {ack.acknowledged_through_ts}")


@cli.command()
@click.argument("conversation_id")
@click.argument("ts", required=False)
@click.pass_context
def ack(ctx: click.Context, conversation_id: str, ts: str | None) -> None:
    """Mark a conversation read through TS (default: its latest message)."""
    with open_store(ctx) as store:
        try:
            if ts is None:
                conversation = store.get(conversation_id)
                if conversation is None:
                    fail(f"Conversation not found: {conversation_id}")
                if not conversation.latest_msg_ts:
                    fail(f"Conversation {conversation_id} has no messages")
                ts = conversation.latest_msg_ts
            store.acknowledge(conversation_id, ts)
        except SlackboxError as e:
            fail(f"Error acknowledging conversation: {e}")
        click.echo(f"Acknowledged {conversation_id} through {ts}")


@cli.command()
@click.argument("conversation_id")
@click.argument("ts")
@click.pass_context
def unack(ctx: click.Context, conversation_id: str, ts: str) -> None:
    """Remove the acknowledgement of a conversation at exactly TS."""
    with open_store(ctx) as store:
        try:
            store.unacknowledge(conversation_id, ts)
        except SlackboxError as e:
            fail(f"Error unacknowledging conversation: {e}")
        click.echo(f"Unacknowledged {conversation_id} at {ts}")


@cli.command()
@click.pass_context
def compact(ctx: click.Context) -> None:
    """Drop acknowledgements superseded by a newer watermark."""
    with open_store(ctx) as store:
        try:
            removed = store.acknowledgements.compact()
        except SlackboxError as e:
            fail(f"Error compacting acknowledgements: {e}")
        click.echo(f"Removed {removed} superseded acknowledgements")


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show stored and supported schema versions."""
    with open_store(ctx) as store:
        click.echo(f"Stored schema version: {store.schema_version}")
        click.echo(f"Supported schema version: {store.supported_version}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
