from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Callable, Optional

from app.core.config import settings
from app.modules.decks.preferences import Preferences
from app.modules.decks.storage import JsonFileStorage, KeyValueStore
from app.modules.decks.store import DeckStore
from app.modules.decks.wizard import CreationWizard, GenerateFn, WizardError
from app.modules.flashcards.client import FlashcardsAPIClient
from app.modules.flashcards.errors import DeckNotFound, DeckStorageCorrupt
from app.modules.flashcards.main import FlashcardsGenerator
from app.modules.study.session import Face, StudySession

InputFn = Callable[[str], str]


def _local_generate(filename: str, data: bytes, count: int, deck_id: str, credential: str):
    return FlashcardsGenerator().generate_sync(
        filename=filename,
        data=data,
        count=count,
        deck_id=deck_id,
        credential=credential,
    )


def _print_cards(wizard: CreationWizard) -> None:
    for i, card in enumerate(wizard.flashcards, start=1):
        print(f"{i:>2}. Q: {card.question}")
        print(f"    A: {card.answer}")


def _review(wizard: CreationWizard, read: InputFn) -> bool:
    """Interactive review; return True when the deck should be saved."""
    help_text = (
        "Commands: s=save, c=cancel, d N=delete card N, "
        "q N TEXT=edit question, a N TEXT=edit answer"
    )
    print(help_text)
    while True:
        raw = read("review> ").strip()
        if not raw:
            continue
        cmd, _, rest = raw.partition(" ")
        try:
            if cmd == "s":
                return True
            if cmd == "c":
                return False
            if cmd == "d":
                wizard.delete_card(int(rest) - 1)
                _print_cards(wizard)
            elif cmd in ("q", "a"):
                num, _, text = rest.partition(" ")
                field = "question" if cmd == "q" else "answer"
                wizard.edit_card(int(num) - 1, field, text)
                _print_cards(wizard)
            else:
                print(help_text)
        except (ValueError, WizardError) as e:
            print(f"error: {e}")


def cmd_generate(args: argparse.Namespace, storage: KeyValueStore, read: InputFn) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"error: no such file: {path}")
        return 1
    prefs = Preferences(storage)
    wizard = CreationWizard(DeckStore(storage), prefs)

    generate: GenerateFn = _local_generate
    if args.remote:
        generate = FlashcardsAPIClient(args.server).generate

    try:
        wizard.set_name(args.name or path.stem)
        wizard.set_count(args.count if args.count is not None else prefs.last_flashcard_count)
        wizard.proceed()
    except WizardError as e:
        print(f"error: {e}")
        return 1

    ok = wizard.run_generation(generate, path.name, path.read_bytes())
    if not ok:
        print(f"Upload failed: {wizard.error}")
        if wizard.needs_credential:
            print("Update your key with: flashcards config set-key sk-...")
        return 1

    if args.json:
        print(json.dumps(FlashcardsGenerator.to_jsonable(wizard.flashcards), indent=2))
    else:
        _print_cards(wizard)

    if not args.yes and not _review(wizard, read):
        wizard.cancel()
        print("Discarded.")
        return 0

    try:
        deck = wizard.confirm()
    except WizardError as e:
        print(f"error: {e}")
        return 1
    except DeckStorageCorrupt as e:
        print(f"error: {e.message}: {e.details}")
        return 1
    print(f"Saved deck '{deck.name}' ({len(deck.flashcards)} cards) id={deck.id}")
    return 0


def cmd_decks(args: argparse.Namespace, storage: KeyValueStore) -> int:
    store = DeckStore(storage)
    if args.decks_cmd == "list":
        decks = store.list()
        if not decks:
            print("No decks yet.")
        for d in decks:
            print(f"{d.id}  {d.name}  ({len(d.flashcards)} cards)")
        return 0
    if args.decks_cmd == "show":
        try:
            deck = store.get(args.id)
        except DeckNotFound as e:
            print(e.message)
            return 1
        print(json.dumps(deck.model_dump(mode="json", by_alias=True), indent=2))
        return 0
    if args.decks_cmd == "delete":
        try:
            store.delete(args.id)
        except DeckStorageCorrupt as e:
            print(f"error: {e.message}: {e.details}")
            return 1
        print(f"Deleted {args.id}")
        return 0
    return 2


def cmd_study(args: argparse.Namespace, storage: KeyValueStore, read: InputFn) -> int:
    try:
        deck = DeckStore(storage).get(args.id)
        session = StudySession(deck)
    except (DeckNotFound, ValueError) as e:
        print(str(e))
        return 1

    keys = {"n": session.next, "p": session.previous, "f": session.flip, "r": session.restart}
    print(f"{deck.name}: n=next, p=previous, f=flip, r=restart, q=quit")
    while True:
        label = "Question" if session.face == Face.QUESTION else "Answer"
        print(f"[{session.index + 1}/{len(session)}] {label}: {session.current_text}")
        choice = read("> ").strip().lower()
        if choice == "q":
            return 0
        action = keys.get(choice)
        if action is not None:
            action()


def cmd_config(args: argparse.Namespace, storage: KeyValueStore) -> int:
    prefs = Preferences(storage)
    if args.config_cmd == "set-key":
        prefs.api_key = args.key
        print("API key saved." if prefs.api_key else "API key cleared.")
        return 0
    if args.config_cmd == "theme":
        print(f"Theme: {prefs.toggle_theme().value}")
        return 0
    if args.config_cmd == "show":
        masked = f"...{prefs.api_key[-4:]}" if prefs.api_key else "(not set)"
        print(f"theme: {prefs.theme.value}")
        print(f"last flashcard count: {prefs.last_flashcard_count}")
        print(f"api key: {masked}")
        return 0
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flashcards", description="Turn documents into flashcard decks"
    )
    parser.add_argument(
        "--data-file",
        default=None,
        help=f"Local storage file (default: {settings.client.data_file})",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="Generate a deck from a .txt or .pdf file")
    g.add_argument("file", help="Path to the document")
    g.add_argument("--count", "-n", type=int, help="Number of flashcards (1-20)")
    g.add_argument("--name", help="Deck name (default: file name)")
    g.add_argument("--remote", action="store_true", help="Use the HTTP endpoint")
    g.add_argument("--server", default=None, help="Server base URL for --remote")
    g.add_argument("--yes", "-y", action="store_true", help="Save without review")
    g.add_argument("--json", action="store_true", help="Print generated cards as JSON")

    d = sub.add_parser("decks", help="Manage saved decks")
    dsub = d.add_subparsers(dest="decks_cmd", required=True)
    dsub.add_parser("list", help="List decks")
    ds = dsub.add_parser("show", help="Print a deck as JSON")
    ds.add_argument("id")
    dd = dsub.add_parser("delete", help="Delete a deck")
    dd.add_argument("id")

    s = sub.add_parser("study", help="Study a deck with flip cards")
    s.add_argument("id")

    c = sub.add_parser("config", help="Local preferences")
    csub = c.add_subparsers(dest="config_cmd", required=True)
    ck = csub.add_parser("set-key", help="Store the OpenAI API key locally")
    ck.add_argument("key")
    csub.add_parser("theme", help="Toggle light/dark theme")
    csub.add_parser("show", help="Show preferences")

    return parser


def main(
    argv: list[str] | None = None,
    *,
    storage: Optional[KeyValueStore] = None,
    read: InputFn = input,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if storage is None:
        storage = JsonFileStorage(args.data_file or settings.client.data_file)

    if args.cmd == "generate":
        return cmd_generate(args, storage, read)
    if args.cmd == "decks":
        return cmd_decks(args, storage)
    if args.cmd == "study":
        return cmd_study(args, storage, read)
    if args.cmd == "config":
        return cmd_config(args, storage)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
