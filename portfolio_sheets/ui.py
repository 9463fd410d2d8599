"""UI helpers for questionary prompts and terminal interaction."""

import contextlib
import functools
import os
import sys
import termios
import threading
import time
import traceback
from io import UnsupportedOperation
from pathlib import Path
from typing import Any, Callable, Generator, Literal, ParamSpec, TypeVar, cast

import pandas as pd
import questionary
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_bindings import merge_key_bindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from prompt_toolkit.shortcuts import clear as prompt_toolkit_clear
from questionary.prompts.path import GreatUXPathCompleter
from questionary.question import Question
from tabulate import tabulate

from portfolio_sheets.coercers import extract_sheet_id
from portfolio_sheets.config import SyncResult
from portfolio_sheets.registry import TabRegistry, TabSource
from portfolio_sheets.tab_parsers import TabParser
from portfolio_sheets.validators import validate_csv_path, validate_sheet_id, validate_tab_name

ParamsT = ParamSpec("ParamsT")
ResultT = TypeVar("ResultT")
MainMenuAction = Literal["register", "ls", "rm", "sync", "show", "reset", "exit_app"]
BackAction = Literal["__back__"]


@contextlib.contextmanager
def _disable_tty_input_echo() -> Generator[None, None, None]:
    """Disable terminal input echo to avoid loader line corruption."""
    try:
        fd = sys.stdin.fileno()
    except (AttributeError, OSError, UnsupportedOperation):
        yield
        return
    if not os.isatty(fd):
        yield
        return
    old = termios.tcgetattr(fd)
    new = termios.tcgetattr(fd)
    new[3] &= ~(termios.ECHO | termios.ICANON)
    termios.tcsetattr(fd, termios.TCSANOW, new)
    termios.tcflush(fd, termios.TCIFLUSH)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, old)
        termios.tcflush(fd, termios.TCIFLUSH)


def _ask(
    question: Question,
    disable_escape_back: bool = False,
    block_typed_input: bool = False,
) -> Any:
    """Run a Questionary prompt with built-in ESC back handling."""
    if not disable_escape_back:
        escape_bindings = KeyBindings()

        @escape_bindings.add("escape", eager=True)
        def _(_event: KeyPressEvent) -> None:
            """Exit prompt immediately and return a back sentinel."""
            _event.app.exit(result="__back__")

        question.application.key_bindings = merge_key_bindings(
            [escape_bindings, question.application.key_bindings]
        )
    if block_typed_input:
        readonly_bindings = KeyBindings()

        def _ignore_keypress(_event: KeyPressEvent) -> None:
            """Ignore blocked key presses for read-only back prompts."""
            return

        readonly_bindings.add("enter", eager=True)(_ignore_keypress)
        for codepoint in range(32, 127):
            readonly_bindings.add(chr(codepoint), eager=True)(_ignore_keypress)
        question.application.key_bindings = merge_key_bindings(
            [readonly_bindings, question.application.key_bindings]
        )
    question.application.ttimeoutlen = 0
    question.application.timeoutlen = 0
    return question.unsafe_ask()


def clear_terminal_viewport() -> None:
    """Clear terminal viewport and scrollback, then reset cursor to top-left."""
    prompt_toolkit_clear()
    sys.stdout.write("\x1b[3J\x1b[2J\x1b[H")
    sys.stdout.flush()


def prompt_for_main_menu_action(has_sync_result: bool) -> MainMenuAction:
    """Prompt for one main-menu action and return selected command key."""
    disabled_exec = None if TabRegistry.deserialize_all() else "No registered tabs"
    disabled_show = None if has_sync_result else "No sync in this session"
    question = questionary.select(
        "Portfolio Sheets",
        choices=[
            questionary.Choice("Register tab", "register"),
            questionary.Choice("List tabs", "ls", disabled=disabled_exec),
            questionary.Choice("Remove tabs", "rm", disabled=disabled_exec),
            questionary.Choice("Sync tabs", "sync", disabled=disabled_exec),
            questionary.Choice("Show sync result", "show", disabled=disabled_show),
            questionary.Choice("Reset sync result", "reset", disabled=disabled_show),
            questionary.Choice("Exit", "exit_app"),
        ],
        erase_when_done=True,
    )
    return cast(MainMenuAction, _ask(question, disable_escape_back=True))


def prompt_for_tab_parser_class() -> type[TabParser] | BackAction:
    """Prompt for tab type selection and return parser class or '__back__'."""
    question = questionary.select(
        "Select tab type [esc to back]:",
        choices=[
            questionary.Choice(class_def.name(), class_def) for class_def in TabRegistry.ls()
        ],
        erase_when_done=True,
    )
    return cast(type[TabParser] | BackAction, _ask(question))


def prompt_for_tab_source(parser_cls: type[TabParser]) -> TabSource | None:
    """Collect CSV path, tab name and sheet id for one tab of the given type."""
    registered_paths = {
        Path(source.path).expanduser().resolve()
        for _, source in TabRegistry.deserialize_all(parser_cls.data_type())
    }

    def _validate_path(raw: str) -> bool | str:
        return validate_csv_path(raw, registered_paths)

    def _file_filter(raw: str) -> bool:
        path = Path(raw).expanduser().resolve()
        return path.is_dir() or (path.is_file() and _validate_path(str(path)) is True)

    path = _ask(
        questionary.text(
            "CSV Path [esc to back]:",
            validate=_validate_path,
            completer=GreatUXPathCompleter(file_filter=_file_filter, expanduser=True),
            erase_when_done=True,
        )
    )
    if path == "__back__":
        return None
    tab_name = _ask(
        questionary.text(
            "Tab Name (optional) [esc to back]:", validate=validate_tab_name, erase_when_done=True
        )
    )
    if tab_name == "__back__":
        return None
    sheet = _ask(
        questionary.text(
            "Spreadsheet URL or ID (optional) [esc to back]:",
            validate=validate_sheet_id,
            erase_when_done=True,
        )
    )
    if sheet == "__back__":
        return None
    return TabSource(
        data_type=parser_cls.data_type(),
        path=str(Path(str(path).strip()).expanduser().resolve()),
        tab_name=str(tab_name).strip(),
        sheet_id=extract_sheet_id(str(sheet)),
    )


def prompt_for_entry_ids_to_remove() -> list[str] | BackAction:
    """Prompt for registered tab IDs to remove and return selected IDs."""
    question = questionary.checkbox(
        "Select tabs to remove [esc to back]:",
        choices=[
            questionary.Choice(
                f"#{entry_id} {TabRegistry.get(source.data_type).name()} ({source.details})",
                entry_id,
            )
            for entry_id, source in TabRegistry.deserialize_all()
        ],
        erase_when_done=True,
    )
    return cast(list[str] | BackAction, _ask(question))


def with_prepare_animation(
    method: Callable[ParamsT, ResultT],
) -> Callable[ParamsT, ResultT]:
    """Decorator that runs method body with sync animation and tty guard."""

    @functools.wraps(method)
    def _wrapped(*args: ParamsT.args, **kwargs: ParamsT.kwargs) -> ResultT:
        stop_event = threading.Event()

        def _run_prepare_animation() -> None:
            """Render a bouncing-star loader with cycling dot suffix."""
            spinner = "|/-\\"
            bar_width = 18
            index = 0
            while not stop_event.is_set():
                bounce = index % (2 * bar_width - 2)
                position = bounce if bounce < bar_width else (2 * bar_width - 2 - bounce)
                track = ["-"] * bar_width
                track[position] = "*"
                dot_suffix = ("." * (index % 3 + 1)).ljust(3)
                message = (
                    f"\rSyncing tabs{dot_suffix} "
                    f"{spinner[index % len(spinner)]} [{''.join(track)}]"
                )
                sys.stdout.write(message)
                sys.stdout.flush()
                index += 1
                time.sleep(0.12)
            sys.stdout.write("\r\x1b[2K")
            sys.stdout.flush()

        loader_thread = threading.Thread(target=_run_prepare_animation, daemon=True)
        with _disable_tty_input_echo():
            loader_thread.start()
            try:
                return method(*args, **kwargs)
            finally:
                stop_event.set()
                loader_thread.join()

    return _wrapped


def wait_for_back_navigation() -> None:
    """Display read-only back prompt and wait until user dismisses it."""
    question = questionary.text("[esc to back]", erase_when_done=True)
    _ask(question, block_typed_input=True)


def print_tab_sources(entries: list[tuple[str, TabSource]]) -> None:
    """Render and print one table with registered tab sources."""
    table = tabulate(
        [
            [entry_id, TabRegistry.get(source.data_type).name(), source.details]
            for entry_id, source in entries
        ],
        headers=["ID", "Tab Type", "Details"],
        tablefmt="simple_outline",
        disable_numparse=True,
    )
    print(table, flush=True)


def _format_cell(value: object) -> str:
    if isinstance(value, bool) or value is None:
        return "" if value is None else str(value)
    if isinstance(value, float):
        return "" if pd.isna(value) else f"{value:,.2f}"
    return str(value)


def format_table(title: str, df: pd.DataFrame) -> str:
    """Render one titled dataframe table with right-aligned numeric columns."""
    numeric = [pd.api.types.is_numeric_dtype(dtype) for dtype in df.dtypes]
    table = tabulate(
        df.map(_format_cell),
        headers="keys",
        tablefmt="simple_outline",
        showindex=False,
        disable_numparse=True,
        colalign=tuple("right" if is_numeric else "left" for is_numeric in numeric),
    )
    return f"\x1b[1m{title}\x1b[0m\n{table}"


def _table_title(data_type: str) -> str:
    if data_type == "holdings":
        return "Holdings"
    return TabRegistry.get(data_type).name()


def print_sync_result(result: SyncResult) -> None:
    """Render sync logs followed by one table per parsed tab."""
    tables = [format_table(_table_title(key), df) for key, df in result.tables().items()]
    print("\n".join([*result.logs, "\n\n".join(tables)]), flush=True)


def print_sync_error(error: Exception) -> None:
    """Render and print framed red traceback for sync errors."""
    traceback_text = "".join(
        traceback.format_exception(type(error), error, error.__traceback__)
    ).rstrip("\n")
    error_lines = traceback_text.splitlines()
    width = max(len(line) for line in error_lines)
    framed_error = "\n".join(
        [
            f"┌{'─' * (width + 2)}┐",
            *[f"│ {line.ljust(width)} │" for line in error_lines],
            f"└{'─' * (width + 2)}┘",
        ]
    )
    print(f"\x1b[31m{framed_error}\x1b[0m", flush=True)
