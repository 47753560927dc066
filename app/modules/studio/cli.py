from __future__ import annotations

import argparse
import asyncio
import getpass
from pathlib import Path
from typing import Optional

from app.core.config import settings
from app.core.exceptions import FlashForgeError
from app.core.logging import get_logger, setup_logging
from app.modules.auth.gate import LOGIN_PATH, AuthGate, LoginForm
from app.modules.auth.session import SupabaseAuth
from app.modules.flashcards.client import GenerationClient
from app.modules.flashcards.models.flashcards import DEFAULT_COUNT, Mode, Style
from app.modules.studio.flip_card import CardFace
from app.modules.studio.view_model import Role, StudioViewModel
from app.modules.user_profile.theme import ProfileStore

logger = get_logger(__name__)

HELP = (
    "Commands: g (generate from new notes), f N (flip card N), c N (copy card N), "
    "count N, style balanced|exam|simple, mode auto|questions|short_notes, "
    "export csv|json, new, help, quit"
)


class TerminalNavigator:
    """Records where the studio would navigate to."""

    def __init__(self) -> None:
        self.location: Optional[str] = None

    def replace(self, path: str) -> None:
        self.location = path
        logger.debug("Navigate (replace) to %s", path)

    def push(self, path: str) -> None:
        self.location = path
        logger.debug("Navigate to %s", path)


def _load_notes(args: argparse.Namespace) -> str:
    if args.notes and args.notes_file:
        raise SystemExit("Provide either --notes or --notes-file, not both")
    if args.notes_file:
        return Path(args.notes_file).read_text(encoding="utf-8")
    return args.notes or ""


def _print_face(index: int, face: CardFace) -> None:
    print(f"[{index}] {face.label}: {face.text}")
    if face.tags:
        print("    tags: " + ", ".join(face.tags))


def _print_cards(vm: StudioViewModel) -> None:
    print(f"\n{vm.title} ({vm.card_summary})")
    for i, face in enumerate(vm.deck.faces(), start=1):
        _print_face(i, face)


def _print_last_reply(vm: StudioViewModel) -> None:
    replies = [e for e in vm.transcript if e.role is Role.ASSISTANT]
    if replies:
        print(f"AI: {replies[-1].content}")
    if vm.error:
        print(f"Error: {vm.error}")


async def _read_notes() -> str:
    print('Paste your notes. Finish with a line containing only "."')
    lines: list[str] = []
    while True:
        line = await asyncio.to_thread(input)
        if line.strip() == ".":
            return "\n".join(lines)
        lines.append(line)


async def _login(args: argparse.Namespace, auth: SupabaseAuth) -> int:
    form = LoginForm(auth, TerminalNavigator())
    if await form.check_existing():
        print("Already signed in.")
        return 0
    email = args.email or await asyncio.to_thread(input, "Email: ")
    password = args.password or await asyncio.to_thread(getpass.getpass, "Password: ")
    if await form.submit(email, password):
        print("Signed in.")
        return 0
    print(f"Sign-in failed: {form.error}")
    return 1


async def _open_studio(auth: SupabaseAuth, profiles: ProfileStore) -> Optional[AuthGate]:
    navigator = TerminalNavigator()
    gate = AuthGate(auth, profiles, navigator)
    await gate.mount()
    if not gate.is_ready:
        gate.teardown()
        if navigator.location == LOGIN_PATH:
            print("Please log in first: flashforge login")
        return None
    return gate


async def _generate(args: argparse.Namespace, vm: StudioViewModel) -> int:
    vm.set_count(args.count)
    vm.set_style(args.style)
    vm.set_mode(args.mode)
    await vm.submit(_load_notes(args))
    _print_last_reply(vm)
    if vm.error:
        return 1
    _print_cards(vm)
    if args.export:
        try:
            path = vm.download(args.export, args.out_dir)
        except FlashForgeError as e:
            print(e.message)
            return 1
        print(f"Saved {path}")
    return 0


async def _studio_loop(vm: StudioViewModel, out_dir: Path) -> int:
    print(HELP)
    while True:
        raw = (await asyncio.to_thread(input, "> ")).strip()
        if not raw:
            continue
        cmd, _, arg = raw.partition(" ")
        arg = arg.strip()
        try:
            if cmd in ("q", "quit", "exit"):
                return 0
            if cmd == "help":
                print(HELP)
            elif cmd == "g":
                if not vm.can_submit:
                    print("A generation is already running.")
                    continue
                print("Generating…")
                await vm.submit(await _read_notes())
                _print_last_reply(vm)
                if vm.flashcards:
                    _print_cards(vm)
            elif cmd in ("f", "c"):
                index = int(arg) - 1
                if not 0 <= index < len(vm.deck):
                    print("No such card.")
                    continue
                if cmd == "f":
                    vm.deck.activate(index)
                    _print_face(index + 1, vm.deck[index].render())
                else:
                    print("Copied." if vm.deck.copy(index) else "Copy unavailable.")
            elif cmd == "count":
                vm.set_count(arg)
                print(f"Cards: {vm.count}")
            elif cmd == "style":
                vm.set_style(arg)
            elif cmd == "mode":
                vm.set_mode(arg)
            elif cmd == "export":
                print(f"Saved {vm.download(arg, out_dir)}")
            elif cmd == "new":
                vm.reset()
                print("Started a new session.")
            else:
                print(HELP)
        except FlashForgeError as e:
            print(e.message)
        except ValueError as e:
            print(f"Invalid input: {e}")


async def _run(args: argparse.Namespace) -> int:
    auth = SupabaseAuth(session_file=settings.identity.session_file)
    profiles = ProfileStore()
    client = GenerationClient()
    try:
        if args.cmd == "login":
            return await _login(args, auth)

        gate = await _open_studio(auth, profiles)
        if gate is None:
            return 1
        try:
            if args.cmd == "logout":
                await gate.sign_out()
                print("Signed out.")
                return 0
            vm = StudioViewModel(client, auth, theme=gate.theme)
            try:
                if args.cmd == "generate":
                    return await _generate(args, vm)
                return await _studio_loop(vm, args.out_dir)
            finally:
                vm.close()
        finally:
            gate.teardown()
    finally:
        await client.aclose()
        await profiles.aclose()
        await auth.aclose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="flashforge", description="Turn study notes into flashcards"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    lg = sub.add_parser("login", help="Sign in with email and password")
    lg.add_argument("--email")
    lg.add_argument("--password", help="Prompted for when omitted")

    sub.add_parser("logout", help="Sign out and forget the stored session")

    g = sub.add_parser("generate", help="Generate a flashcard set from notes")
    g.add_argument("--notes", "-n", help="Notes text")
    g.add_argument("--notes-file", help="Path to a file containing the notes")
    g.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Cards (3-50)")
    g.add_argument("--style", choices=[s.value for s in Style], default=Style.BALANCED.value)
    g.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.AUTO.value)
    g.add_argument("--export", choices=["csv", "json"], help="Save the set to a file")
    g.add_argument("--out-dir", type=Path, default=settings.export_dir)

    st = sub.add_parser("studio", help="Interactive studio")
    st.add_argument("--out-dir", type=Path, default=settings.export_dir)

    args = parser.parse_args(argv)
    setup_logging()
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
