"""Interactive console application for syncing and reconciling spreadsheet tabs."""

import sys
from typing import cast

from portfolio_sheets import ui
from portfolio_sheets.config import SyncLogs, SyncResult
from portfolio_sheets.registry import TabRegistry
from portfolio_sheets.sync import run_sync

_SYNC_EXCEPTIONS = (
    ArithmeticError,
    AssertionError,
    AttributeError,
    BufferError,
    EOFError,
    ImportError,
    LookupError,
    MemoryError,
    NameError,
    OSError,
    ReferenceError,
    RuntimeError,
    SyntaxError,
    SystemError,
    TypeError,
    UnicodeError,
    ValueError,
)


class App:
    """Stateful interactive console app for syncing registered tabs."""

    def __init__(self) -> None:
        """Initialize in-session sync result cache."""
        self.sync_result: SyncResult | None = None
        self.logs = SyncLogs()

    def run(self) -> None:
        """Run interactive registry command loop."""
        while True:
            ui.clear_terminal_viewport()
            main_menu_action = ui.prompt_for_main_menu_action(self.sync_result is not None)
            getattr(self, main_menu_action)()

    def register(self) -> None:
        """CLI command: register one tab source."""
        while True:
            parser_class = ui.prompt_for_tab_parser_class()
            if parser_class == "__back__":
                return
            source = ui.prompt_for_tab_source(parser_class)
            if source is None:
                continue
            break
        TabRegistry.serialize(source)
        self._reset()

    def ls(self) -> None:
        """CLI command: list registered tab sources."""
        deserialized = TabRegistry.deserialize_all()
        ui.print_tab_sources(deserialized)
        ui.wait_for_back_navigation()

    def rm(self) -> None:
        """CLI command: remove one or more registered tab sources."""
        entry_ids_to_remove = ui.prompt_for_entry_ids_to_remove()
        if entry_ids_to_remove == "__back__" or not entry_ids_to_remove:
            return
        for entry_id in entry_ids_to_remove:
            TabRegistry.unregister(entry_id)
        self._reset()

    def sync(self) -> None:
        """CLI command: parse every registered tab and reconcile holdings."""
        sources = [source for _, source in TabRegistry.deserialize_all()]
        self._reset()

        @ui.with_prepare_animation
        def _run_sync() -> SyncResult:
            return run_sync(sources, self.logs)

        try:
            self.sync_result = _run_sync()
            self.show()
        except _SYNC_EXCEPTIONS as error:
            self._reset()
            self._show_error(error)

    def show(self) -> None:
        """CLI command: display last in-session sync result."""
        ui.print_sync_result(cast(SyncResult, self.sync_result))
        ui.wait_for_back_navigation()

    def reset(self) -> None:
        """CLI command: drop last in-session sync result."""
        self._reset()

    def exit_app(self) -> None:
        """Exit interactive run loop."""
        self._reset()
        sys.exit(0)

    def _reset(self) -> None:
        """Reset in-session sync result cache."""
        self.sync_result = None
        self.logs.clear()

    def _show_error(self, error: Exception) -> None:
        """Display framed sync error and wait for back navigation."""
        ui.print_sync_error(error)
        ui.wait_for_back_navigation()


def main() -> None:
    """CLI entrypoint with clean Ctrl-C exit code."""
    app = App()
    try:
        app.run()
    except KeyboardInterrupt:
        app.exit_app()


if __name__ == "__main__":
    main()
