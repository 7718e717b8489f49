"""Entry point for the Kanban board application."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PyQt6.QtCore import QSize, Qt, QTimer
from PyQt6.QtGui import QColor, QKeySequence, QPalette, QShortcut
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QGroupBox,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from kanban_board.actions import BoardActions
from kanban_board.config import CONFIG_PATH, AppConfig
from kanban_board.dialogs import DialogBroker, DialogKind, DialogRequest
from kanban_board.errors import KanbanError
from kanban_board.events import BOARD_CHANGED, EventBus
from kanban_board.logging_utils import configure_logging
from kanban_board.messages import message
from kanban_board.models import BoardList, Card, DeletionKind, PendingDeletion
from kanban_board.notifications import Notification, ToastCenter, error, publish
from kanban_board.persistence import PersistenceQueue
from kanban_board.realtime import RealtimeSync
from kanban_board.storage import JsonBoardBackend
from kanban_board.store import BoardStore
from kanban_board.undo import UndoCoordinator

logger = logging.getLogger(__name__)

TOAST_COLORS = {
    "success": "#2f9e6e",
    "error": "#d9485f",
    "warning": "#d9a13b",
    "info": "#3f7cff",
}


def create_application() -> QApplication:
    app = QApplication([])
    app.setApplicationName("Kanban Board")
    palette = app.palette()
    for role, color in (
        (QPalette.ColorRole.Window, "#0f111a"),
        (QPalette.ColorRole.WindowText, "#e8ebf2"),
        (QPalette.ColorRole.Base, "#141724"),
        (QPalette.ColorRole.Text, "#e8ebf2"),
        (QPalette.ColorRole.Button, "#1c2030"),
        (QPalette.ColorRole.ButtonText, "#e8ebf2"),
        (QPalette.ColorRole.Highlight, "#3f7cff"),
        (QPalette.ColorRole.HighlightedText, "#ffffff"),
    ):
        palette.setColor(role, QColor(color))
    app.setPalette(palette)
    app.setStyleSheet(
        "\n".join(
            [
                "QWidget { font-size: 11pt; color: #e8ebf2; }",
                (
                    "QPushButton { background-color: #3f7cff; color: #ffffff; padding: 6px 14px;"
                    " border-radius: 6px; font-weight: 600; }"
                ),
                "QPushButton:hover { background-color: #5b92ff; }",
                (
                    "QListWidget { background-color: #141724; border: 1px solid #2a2d3f;"
                    " border-radius: 8px; padding: 6px; }"
                ),
                (
                    "QListWidget::item { margin: 4px 0; padding: 12px; border-radius: 8px;"
                    " background: #1c2030; border: 1px solid #2a2d3f; }"
                ),
                "QListWidget::item:selected { background-color: #3f7cff; color: #ffffff; }",
                (
                    "QGroupBox { border: 1px solid #1f2336; border-radius: 10px;"
                    " margin-top: 20px; padding: 12px; background: #141724; }"
                ),
                (
                    "QGroupBox::title { subcontrol-origin: margin; left: 14px;"
                    " padding: 0 6px; font-weight: 600; color: #9ca3c7; }"
                ),
            ]
        )
    )
    return app


class CardListWidget(QListWidget):
    """One column of cards. Drops are turned into store moves."""

    def __init__(self, board_view: "BoardView", board_list: BoardList) -> None:
        super().__init__()
        self.board_view = board_view
        self.list_id = board_list.id
        self.setObjectName(board_list.id)
        self.setAcceptDrops(True)
        self.setDragEnabled(True)
        self.setDefaultDropAction(Qt.DropAction.MoveAction)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DragDrop)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setMinimumWidth(260)
        for card in board_list.cards:
            self.addItem(self._make_item(card))
        self.itemDoubleClicked.connect(self._rename_card)

    def _make_item(self, card: Card) -> QListWidgetItem:
        text = card.title
        if card.description:
            description = card.description.strip()
            if len(description) > 120:
                description = description[:117].rstrip() + "…"
            text = f"{card.title}\n{description}"
        item = QListWidgetItem(text)
        item.setData(Qt.ItemDataRole.UserRole, card.id)
        item.setSizeHint(QSize(240, 64 if card.description else 44))
        return item

    def selected_card_id(self) -> Optional[str]:
        item = self.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    def _rename_card(self, item: QListWidgetItem) -> None:
        card_id = item.data(Qt.ItemDataRole.UserRole)
        card = self.board_view.store.get_card(card_id)
        title, ok = QInputDialog.getText(self, "Rename card", "Card title:", text=card.title)
        if ok:
            self.board_view.run(lambda: self.board_view.actions.rename_card(card_id, title))

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if isinstance(event.source(), CardListWidget):
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        if isinstance(event.source(), CardListWidget):
            event.acceptProposedAction()
        else:
            super().dragMoveEvent(event)

    def dropEvent(self, event) -> None:  # type: ignore[override]
        source = event.source()
        if not isinstance(source, CardListWidget):
            event.ignore()
            return
        card_id = source.selected_card_id()
        if not card_id:
            event.ignore()
            return
        row = self._drop_row(event)
        if source is self and row > source.currentRow():
            # Destination index refers to the column after the card left it.
            row -= 1
        # Copy action keeps Qt from deleting the source row; the board is rebuilt instead.
        event.setDropAction(Qt.DropAction.CopyAction)
        event.accept()
        self.board_view.run(lambda: self.board_view.actions.move_card(card_id, self.list_id, row))

    def _drop_row(self, event) -> int:
        index = self.indexAt(event.position().toPoint())
        if not index.isValid():
            return self.count()
        indicator = self.dropIndicatorPosition()
        if indicator == QAbstractItemView.DropIndicatorPosition.BelowItem:
            return index.row() + 1
        return index.row()


class UndoBar(QWidget):
    """Shows the pending deletion with a live countdown and an Undo button."""

    def __init__(self, coordinator: UndoCoordinator, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.coordinator = coordinator
        self.setStyleSheet("background: #1f2336; border-radius: 8px;")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        self.label = QLabel()
        layout.addWidget(self.label)
        layout.addStretch()
        undo_button = QPushButton(message("undo.action"))
        undo_button.clicked.connect(self._undo)
        layout.addWidget(undo_button)
        dismiss_button = QPushButton("✕")
        dismiss_button.setFixedWidth(36)
        dismiss_button.clicked.connect(coordinator.discard_pending)
        layout.addWidget(dismiss_button)
        self._ticker = QTimer(self)
        self._ticker.setInterval(250)
        self._ticker.timeout.connect(self._tick)
        coordinator.subscribe(self.show_pending)
        self.hide()

    def show_pending(self, record: Optional[PendingDeletion]) -> None:
        if record is None:
            self._ticker.stop()
            self.hide()
            return
        self._tick()
        self._ticker.start()
        self.show()

    def _tick(self) -> None:
        record = self.coordinator.pending
        if record is None:
            self.show_pending(None)
            return
        seconds = (self.coordinator.remaining_ms() + 999) // 1000
        key = "card.deleted" if record.kind is DeletionKind.CARD else "list.deleted"
        self.label.setText(f"{message(key, title=record.title)} ({seconds}s)")

    def _undo(self) -> None:
        window = self.window()
        if isinstance(window, MainWindow):
            window.board_view.undo()


class ToastStrip(QWidget):
    def __init__(self, toasts: ToastCenter, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.toast_center = toasts
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(6)
        toasts.subscribe(self.render)

    def render(self, toasts: List[Notification]) -> None:
        while self._layout.count():
            widget = self._layout.takeAt(0).widget()
            if widget:
                widget.setParent(None)
        for toast in toasts[-3:]:
            if toast.action_label:
                continue
            label = QLabel(f"<b>{toast.title}</b>  {toast.message}")
            label.setStyleSheet(
                f"background: {TOAST_COLORS.get(toast.kind, '#3f7cff')}; color: #ffffff;"
                " padding: 8px 12px; border-radius: 8px;"
            )
            self._layout.addWidget(label)


class BoardView(QWidget):
    def __init__(
        self,
        store: BoardStore,
        actions: BoardActions,
        coordinator: UndoCoordinator,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.actions = actions
        self.coordinator = coordinator
        self.columns: Dict[str, CardListWidget] = {}
        self._build_ui()
        actions.bus.on(BOARD_CHANGED, lambda _payload: self.refresh_later())
        coordinator.subscribe(lambda _record: self.refresh_later())

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.columns_container = QWidget()
        self.columns_layout = QHBoxLayout(self.columns_container)
        self.columns_layout.setSpacing(12)
        scroll.setWidget(self.columns_container)
        layout.addWidget(scroll)

        self.empty_state = QLabel("No lists yet. Click 'New List' to create your first list.")
        self.empty_state.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_state.setStyleSheet("color: #5f6368; font-size: 12pt; margin: 40px 0;")
        layout.addWidget(self.empty_state)
        self.refresh()

    def refresh(self) -> None:
        for i in reversed(range(self.columns_layout.count())):
            widget = self.columns_layout.takeAt(i).widget()
            if widget:
                widget.setParent(None)
        self.columns.clear()
        self.empty_state.setVisible(not self.store.lists)
        for board_list in self.store.lists:
            group = QGroupBox(board_list.title)
            group_layout = QVBoxLayout(group)
            card_list = CardListWidget(self, board_list)
            group_layout.addWidget(card_list)
            buttons = QHBoxLayout()
            add_button = QPushButton("Add Card")
            add_button.clicked.connect(
                lambda _checked=False, list_id=board_list.id: self.actions.prompt_new_card(list_id)
            )
            buttons.addWidget(add_button)
            delete_card_button = QPushButton("Delete Card")
            delete_card_button.clicked.connect(
                lambda _checked=False, widget=card_list: self._delete_selected(widget)
            )
            buttons.addWidget(delete_card_button)
            delete_list_button = QPushButton("Delete List")
            delete_list_button.clicked.connect(
                lambda _checked=False, list_id=board_list.id: self.actions.confirm_and_delete_list(list_id)
            )
            buttons.addWidget(delete_list_button)
            group_layout.addLayout(buttons)
            self.columns_layout.addWidget(group)
            self.columns[board_list.id] = card_list
        self.columns_layout.addStretch()

    def _delete_selected(self, widget: CardListWidget) -> None:
        card_id = widget.selected_card_id()
        if card_id:
            self.actions.confirm_and_delete_card(card_id)

    def undo(self) -> None:
        self.run(self.coordinator.undo_last_delete)

    def run(self, operation) -> None:
        try:
            operation()
        except KanbanError as exc:
            logger.warning("Board operation failed: %s", exc)
            publish(self.actions.bus, error(str(exc)))
        self.refresh_later()

    def refresh_later(self) -> None:
        # Rebuilding columns from inside one of their own handlers would delete
        # the widget that is still dispatching the event.
        QTimer.singleShot(0, self.refresh)


class MainWindow(QMainWindow):
    def __init__(self, config: AppConfig) -> None:
        super().__init__()
        self.config = config
        self.setWindowTitle("Kanban Board")
        self.resize(1200, 800)
        self.bus = EventBus()
        self.backend = JsonBoardBackend(config.data_path)
        self.persistence = PersistenceQueue(self.backend, self.bus)
        self.store = BoardStore()
        self.store.load(self.backend)
        self.coordinator = UndoCoordinator(
            self.store, self.bus, self.persistence, timeout_ms=config.undo_timeout_ms
        )
        self.broker = DialogBroker()
        self.broker.add_presenter(self._present_dialog)
        self.actions = BoardActions(
            self.store, self.bus, self.coordinator, self.persistence, self.broker
        )
        self.realtime = RealtimeSync(
            self.store, self.coordinator.is_pending, self.bus, self.coordinator.forget
        )
        self.toasts = ToastCenter(self.bus, config=config)
        self._init_ui()
        self._create_menus()

    def _init_ui(self) -> None:
        central = QWidget()
        layout = QVBoxLayout(central)
        self.board_view = BoardView(self.store, self.actions, self.coordinator)
        layout.addWidget(self.board_view)
        layout.addWidget(UndoBar(self.coordinator))
        layout.addWidget(ToastStrip(self.toasts))
        self.setCentralWidget(central)
        QShortcut(QKeySequence.StandardKey.Undo, self, activated=self.board_view.undo)

    def _create_menus(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)
        new_list_action = toolbar.addAction("New List")
        new_list_action.triggered.connect(self.actions.prompt_new_list)
        undo_action = toolbar.addAction("Undo Delete")
        undo_action.triggered.connect(self.board_view.undo)

    def apply_remote_change(self, payload: dict) -> None:
        """Feed one change from the realtime channel into the board."""
        self.realtime.apply(payload)

    def _present_dialog(self, request: DialogRequest) -> None:
        # Show on the next tick so the requesting handler returns first.
        QTimer.singleShot(0, lambda: self._show_dialog(request))

    def _show_dialog(self, request: DialogRequest) -> None:
        if request.kind is DialogKind.TEXT:
            text, ok = QInputDialog.getText(
                self, request.title or "Kanban Board", request.message,
                text=request.options.get("default", ""),
            )
            if ok:
                self.broker.respond(request.id, text)
            else:
                self.broker.cancel(request.id)
        else:
            answer = QMessageBox.question(
                self,
                request.title or "Kanban Board",
                request.message,
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            )
            if answer == QMessageBox.StandardButton.Yes:
                self.broker.respond(request.id, True)
            else:
                self.broker.cancel(request.id)
        self.board_view.refresh_later()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.broker.cancel_all()
        self.coordinator.shutdown()
        self.persistence.drain()
        super().closeEvent(event)


def main() -> None:
    config = AppConfig.load(CONFIG_PATH)
    configure_logging(config.log_path, config.log_level)
    logging.info("Starting Kanban application")
    app = create_application()
    window = MainWindow(config)
    window.show()
    app.exec()


if __name__ == "__main__":
    main()
