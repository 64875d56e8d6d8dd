"""
Interactive terminal console for GreenGitch.

Architectural role:
- Renders the generation console: city/issue menus, generate trigger, gallery.
- Keeps one explicit `ConsoleState` for the session and passes it to handlers.
- Delegates all network work to `app.console.actions`.

Interface responsibilities:
- Accept stdin commands and render notifications and the gallery to stdout.
- Resolve menu choices by number or (case-insensitive) name.

Request lifecycle (per command):
1. Read one line from stdin.
2. Handle local commands (`cities`, `city`, `issues`, `issue`, `gallery`,
   `help`, `exit`/`quit`).
3. Run network commands (`generate`, `save`, `share`) through one
   `httpx.AsyncClient` bound to the server URL.

Input validation behavior:
- Empty input is ignored.
- `generate` is refused until both city and issue are selected.
- `issue` is refused until a city is selected; changing city clears the issue.

Error handling strategy:
- Handler failures surface as notifications, never tracebacks.
- EOF and keyboard interrupts terminate the loop cleanly.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import sys

import httpx

from app.console.actions import (
    SHARE_PLATFORMS,
    download_image,
    is_placeholder,
    share_image,
    trigger_generation,
)
from app.console.catalog import list_cities
from app.console.config import ConsoleConfig
from app.console.notifications import Notification, NotificationLog
from app.console.state import ConsoleState


HELP_TEXT = """Commands:
 cities                   list cities
 city <n|name>            select a city (clears the issue)
 issues                   list issues for the selected city
 issue <n|name>           select a climate issue
 generate                 generate awareness images
 gallery                  show the current results
 save <n>                 download image n
 share <n> <platform>     share image n (twitter, facebook, instagram)
 exit                     quit
"""

SKELETON_SLOTS = 3


# =========================================================
# UTF-8 SAFE OUTPUT
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except Exception:
        pass


# =========================================================
# RENDERING
# =========================================================

def print_notification(notification: Notification) -> None:
    marker = "!" if notification.destructive else "*"
    print(f"{marker} {notification.title}: {notification.description}")


def print_options(title: str, options: list[str], selected: str = "") -> None:
    print(f"\n{title}:")
    for i, option in enumerate(options, start=1):
        marker = " (selected)" if option == selected else ""
        print(f" {i}. {option}{marker}")
    print()


def render_gallery(state: ConsoleState) -> None:
    if not state.images:
        print("No images yet.")
        return

    for i, image in enumerate(state.images, start=1):
        kind = "placeholder" if is_placeholder(image.url) else "image"
        print(f"[{i}] {image.provider} ({kind})")
        if image.error:
            print(f"    error: {image.error}")
        if not is_placeholder(image.url):
            print("    actions: save, share twitter|facebook|instagram")


def resolve_choice(arg: str, options: list[str]) -> str | None:
    """Map a 1-based number or case-insensitive name to an option."""
    arg = arg.strip()
    if arg.isdigit():
        index = int(arg) - 1
        return options[index] if 0 <= index < len(options) else None
    for option in options:
        if option.lower() == arg.lower():
            return option
    return None


def _entry_url(state: ConsoleState, arg: str) -> str | None:
    if not arg.isdigit():
        return None
    index = int(arg) - 1
    if 0 <= index < len(state.images):
        return state.images[index].url
    return None


# =========================================================
# NETWORK COMMANDS
# =========================================================

def _client(config: ConsoleConfig) -> httpx.AsyncClient:
    # the generation timeout is enforced by the cancellation token
    return httpx.AsyncClient(base_url=config.server_url, timeout=None)


async def run_generate(state: ConsoleState, notifier: NotificationLog, config: ConsoleConfig) -> None:
    print("\nGenerating...")
    for _ in range(SKELETON_SLOTS):
        print(" [" + "." * 40 + "]")

    async with _client(config) as client:
        generated = await trigger_generation(
            state, client, notifier, timeout=config.timeout_seconds
        )

    if generated:
        print()
        render_gallery(state)


async def run_save(url: str, notifier: NotificationLog, config: ConsoleConfig) -> None:
    async with _client(config) as client:
        path = await download_image(url, notifier, client, config.download_dir)
    if path is not None:
        print(f"Saved to {path}")


# =========================================================
# COMMAND DISPATCH
# =========================================================

def handle_command(
    line: str,
    state: ConsoleState,
    notifier: NotificationLog,
    config: ConsoleConfig,
) -> bool:
    """Execute one console command.

    Returns:
        `False` when the session should end, otherwise `True`.
    """
    parts = line.strip().split()
    if not parts:
        return True

    command = parts[0].lower()
    rest = " ".join(parts[1:])

    if command in ("exit", "quit"):
        return False

    if command == "help":
        print(HELP_TEXT)

    elif command == "cities":
        print_options("Cities", list_cities(), state.city)

    elif command == "city":
        city = resolve_choice(rest, list_cities())
        if city is None:
            print(f"Unknown city: {rest!r}. Type 'cities' to list them.")
        else:
            state.select_city(city)
            print(f"City: {state.city}")
            print_options("Climate issues", state.available_issues)

    elif command == "issues":
        if not state.city:
            print("Select a city first.")
        else:
            print_options(f"Climate issues in {state.city}", state.available_issues, state.issue)

    elif command == "issue":
        if not state.city:
            print("Select a city first.")
        else:
            issue = resolve_choice(rest, state.available_issues)
            if issue is None:
                print(f"Unknown issue: {rest!r}. Type 'issues' to list them.")
            else:
                state.select_issue(issue)
                print(f"Issue: {state.issue}")

    elif command == "generate":
        if not state.can_generate:
            print("Select a city and a climate issue first.")
        else:
            asyncio.run(run_generate(state, notifier, config))

    elif command == "gallery":
        render_gallery(state)

    elif command == "save":
        url = _entry_url(state, rest)
        if url is None:
            print("Usage: save <n> (see 'gallery')")
        else:
            asyncio.run(run_save(url, notifier, config))

    elif command == "share":
        url = _entry_url(state, parts[1]) if len(parts) == 3 else None
        platform = parts[2].lower() if len(parts) == 3 else ""
        if url is None or platform not in SHARE_PLATFORMS:
            print("Usage: share <n> <twitter|facebook|instagram>")
        else:
            shared = share_image(state, url, platform, notifier, config.share_page_url)
            if shared:
                print(f"Opened {shared}")

    else:
        print(f"Unknown command: {command}. Type 'help'.")

    return True


# =========================================================
# MAIN
# =========================================================

def main():
    """
    Run the interactive console loop.

    Error handling strategy:
    - EOF/interrupt end the session without stack traces, including an
      interrupt during a running command.
    - Invalid environment settings are reported before the loop starts.
    """
    try:
        config = ConsoleConfig()
    except ValueError as exc:
        print(f"Invalid console configuration: {exc}")
        return

    state = ConsoleState()
    notifier = NotificationLog(listener=print_notification)

    print("GreenGitch (Type 'help' for commands, 'exit' to quit)")
    print(f"Server: {config.server_url}")
    print("-" * 60)
    print_options("Cities", list_cities())

    while True:

        try:
            line = input("> ")
            running = handle_command(line, state, notifier, config)

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nInterrupted.")
            break

        if not running:
            print("Shutting down.")
            break


if __name__ == "__main__":
    main()
