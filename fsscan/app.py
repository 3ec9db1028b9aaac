from __future__ import annotations

import os
import sys
import time
from typing import Dict, Optional

from PySide6.QtCore import Qt, QThread, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QFileDialog, QTreeWidget, QTreeWidgetItem, QSplitter, QLineEdit,
    QProgressBar, QMessageBox, QTableWidget, QTableWidgetItem, QTextEdit,
    QHeaderView, QAbstractItemView, QSpinBox, QComboBox, QDialog,
    QDialogButtonBox, QCheckBox, QGridLayout, QMenu
)

from .config import ScanConfig, SearchMode
from .drives import list_drives, estimate_total_bytes
from .errors import ConfigError
from .models import DirectoryTally, EmittedEntry, EntryKind, RollUp, ScanReport
from .sinks import CollectingSink, ROLLUP_LABELS, describe_report
from .utils import format_bytes, format_mtime, format_permissions, reveal_in_file_manager
from .walker import scan

APP_NAME = "fsscan"

STYLE_QSS = r"""
* { font-size: 12px; }
QMainWindow { background: #10141f; }
QWidget { color: #dbe6ff; }
QLineEdit, QTextEdit, QTreeWidget, QTableWidget, QSpinBox, QComboBox {
    background: #161c2b;
    border: 1px solid #2a3650;
    border-radius: 6px;
    padding: 4px 6px;
}
QPushButton {
    background: #1b2540;
    border: 1px solid #2f3f63;
    border-radius: 6px;
    padding: 6px 10px;
}
QPushButton:hover { background: #22305a; }
QPushButton:disabled { color: #6a7894; }
QHeaderView::section { background: #131a29; color: #9fb6ea; padding: 5px; border: none; }
QProgressBar { background: #131a29; border: 1px solid #2a3650; border-radius: 6px; text-align: center; }
QProgressBar::chunk { background: #2f6bff; border-radius: 6px; }
"""

SEARCH_MODES = [
    ("No search", SearchMode.NONE),
    ("Exact name", SearchMode.EXACT),
    ("Exact name, no extension", SearchMode.EXACT_NO_EXTENSION),
    ("Name contains", SearchMode.CONTAINS),
]


# -------------------- Worker thread --------------------
class ProgressSink(CollectingSink):
    """Collects everything and reports progress at most every 100 ms."""

    def __init__(self, progress_cb):
        super().__init__()
        self._progress_cb = progress_cb
        self._last_emit = 0.0
        self.files = 0
        self.dirs = 0
        self.bytes_seen = 0

    def end_directory(self, path: str, depth: int, tally: DirectoryTally) -> None:
        super().end_directory(path, depth, tally)
        self.files += tally.file_count
        self.dirs += 1
        self.bytes_seen += tally.total_file_bytes
        now = time.time()
        if now - self._last_emit >= 0.10:
            self._last_emit = now
            self._progress_cb(path, self.files, self.dirs, self.bytes_seen)


class ScanThread(QThread):
    progress = Signal(str, int, int, object)  # path, files, dirs, bytes (may exceed int32)
    done = Signal(object, object)             # ScanReport, ProgressSink
    error = Signal(str)

    def __init__(self, root: str, config: ScanConfig):
        super().__init__()
        self.root = root
        self.config = config

    def run(self):
        try:
            def prog(cur: str, files: int, dirs: int, bytes_seen: int):
                self.progress.emit(cur, files, dirs, bytes_seen)
            sink = ProgressSink(prog)
            report = scan(self.root, self.config, sink)
            self.done.emit(report, sink)
        except Exception as e:
            self.error.emit(str(e))


# -------------------- Dialogs --------------------
class DrivePicker(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Choose a drive")
        self.resize(640, 360)
        self.selected: Optional[str] = None

        v = QVBoxLayout(self)
        v.addWidget(QLabel("Pick the mounted volume to scan."))

        self.table = QTableWidget(0, 4)
        self.table.setHorizontalHeaderLabels(["Mountpoint", "Total", "Used", "Free"])
        for col in range(4):
            self.table.horizontalHeader().setSectionResizeMode(col, QHeaderView.ResizeToContents)
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.table.itemDoubleClicked.connect(lambda _it: self.accept())
        v.addWidget(self.table, 1)

        for d in list_drives():
            r = self.table.rowCount()
            self.table.insertRow(r)
            self.table.setItem(r, 0, QTableWidgetItem(d.mountpoint))
            self.table.setItem(r, 1, QTableWidgetItem(format_bytes(d.total)))
            self.table.setItem(r, 2, QTableWidgetItem(format_bytes(d.used)))
            self.table.setItem(r, 3, QTableWidgetItem(format_bytes(d.free)))

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)
        v.addWidget(btns)

    def accept(self):
        row = self.table.currentRow()
        item = self.table.item(row, 0) if row >= 0 else None
        self.selected = item.text() if item else None
        super().accept()


# -------------------- Main window --------------------
class MainWindow(QMainWindow):
    def __init__(self, initial_path: str = ""):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} - filesystem tree scanner")
        self.resize(1100, 760)

        self.scan_thread: Optional[ScanThread] = None
        self.total_est_bytes = 1
        self._dir_items: Dict[str, QTreeWidgetItem] = {}
        self._root = ""

        central = QWidget()
        self.setCentralWidget(central)
        root = QVBoxLayout(central)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)

        # ---------- Source row
        title = QLabel(APP_NAME)
        tf = QFont(); tf.setPointSize(15); tf.setBold(True)
        title.setFont(tf)
        root.addWidget(title)

        src_row = QHBoxLayout()
        self.path_edit = QLineEdit(initial_path or os.getcwd())
        btn_folder = QPushButton("Folder...")
        btn_drives = QPushButton("Drives...")
        self.btn_scan = QPushButton("Scan")
        src_row.addWidget(self.path_edit, 1)
        src_row.addWidget(btn_folder)
        src_row.addWidget(btn_drives)
        src_row.addWidget(self.btn_scan)
        root.addLayout(src_row)

        # ---------- Options
        opts = QGridLayout()
        self.cb_recursive = QCheckBox("Recursive")
        self.depth = QSpinBox()
        self.depth.setRange(0, 1000)
        self.depth.setPrefix("max depth ")
        self.depth.setSpecialValueText("unlimited depth")
        self.cb_hidden = QCheckBox("Hidden")
        self.cb_files = QCheckBox("Files")
        self.cb_files.setChecked(True)
        self.cb_symlinks = QCheckBox("Symlinks")
        self.cb_special = QCheckBox("Special")
        self.cb_dir_size = QCheckBox("Directory sizes")
        self.cb_perms = QCheckBox("Permissions")
        self.cb_mtime = QCheckBox("Modified")
        self.cb_errors = QCheckBox("Errors")
        self.cb_errors.setChecked(True)
        self.search_mode = QComboBox()
        for label, _mode in SEARCH_MODES:
            self.search_mode.addItem(label)
        self.pattern_edit = QLineEdit()
        self.pattern_edit.setPlaceholderText("search pattern")

        row0 = [self.cb_recursive, self.depth, self.cb_hidden, self.cb_files, self.cb_symlinks, self.cb_special]
        row1 = [self.cb_dir_size, self.cb_perms, self.cb_mtime, self.cb_errors, self.search_mode, self.pattern_edit]
        for col, w in enumerate(row0):
            opts.addWidget(w, 0, col)
        for col, w in enumerate(row1):
            opts.addWidget(w, 1, col)
        root.addLayout(opts)

        prog_row = QHBoxLayout()
        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.summary = QLabel("Ready.")
        prog_row.addWidget(self.progress, 1)
        prog_row.addWidget(self.summary)
        root.addLayout(prog_row)

        # ---------- Results
        splitter = QSplitter(Qt.Vertical)
        self.tree = QTreeWidget()
        self.tree.setHeaderLabels(["Name", "Kind", "Size", "Permissions", "Modified"])
        self.tree.setUniformRowHeights(True)
        self.tree.header().setSectionResizeMode(0, QHeaderView.Stretch)
        self.tree.setContextMenuPolicy(Qt.CustomContextMenu)
        self.tree.customContextMenuRequested.connect(self._tree_path_menu)
        splitter.addWidget(self.tree)

        self.log = QTextEdit()
        self.log.setReadOnly(True)
        splitter.addWidget(self.log)
        splitter.setSizes([600, 140])
        root.addWidget(splitter, 1)

        btn_folder.clicked.connect(self.pick_folder)
        btn_drives.clicked.connect(self.pick_drive)
        self.btn_scan.clicked.connect(self.start_scan)

    # ---------- Source
    def pick_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Choose folder", self.path_edit.text() or os.path.expanduser("~"))
        if path:
            self.path_edit.setText(path)

    def pick_drive(self):
        dlg = DrivePicker(self)
        if dlg.exec() == QDialog.Accepted and dlg.selected:
            self.path_edit.setText(dlg.selected)

    def build_config(self) -> ScanConfig:
        mode = SEARCH_MODES[self.search_mode.currentIndex()][1]
        return ScanConfig(
            recursive=self.cb_recursive.isChecked(),
            max_depth=self.depth.value(),
            show_permissions=self.cb_perms.isChecked(),
            show_mtime=self.cb_mtime.isChecked(),
            show_hidden=self.cb_hidden.isChecked(),
            show_files=self.cb_files.isChecked(),
            show_symlinks=self.cb_symlinks.isChecked(),
            show_special=self.cb_special.isChecked(),
            show_dir_size=self.cb_dir_size.isChecked(),
            show_errors=self.cb_errors.isChecked(),
            search_mode=mode,
            search_pattern=self.pattern_edit.text() if mode is not SearchMode.NONE else None,
        )

    # ---------- Scan
    def start_scan(self):
        path = self.path_edit.text().strip()
        if not path or not os.path.isdir(path):
            QMessageBox.warning(self, "Not found", f"Not a directory: {path}")
            return
        try:
            config = self.build_config()
        except ConfigError as e:
            QMessageBox.warning(self, "Options", str(e))
            return

        self.total_est_bytes = estimate_total_bytes([path]) or 1
        self.progress.setValue(0)
        self.summary.setText("Scanning...")
        self.tree.clear()
        self.log.clear()
        self._dir_items = {}

        self.scan_thread = ScanThread(path, config)
        self.scan_thread.progress.connect(self.on_scan_progress)
        self.scan_thread.done.connect(self.on_scan_done)
        self.scan_thread.error.connect(self.on_scan_error)
        self.btn_scan.setEnabled(False)
        self.scan_thread.start()
        self.statusBar().showMessage("Scan started...")

    def on_scan_progress(self, cur: str, files: int, dirs: int, bytes_seen):
        bs = int(bytes_seen or 0)
        pct = min(100, int(bs * 100 / self.total_est_bytes))
        if pct > self.progress.value():
            self.progress.setValue(pct)
        cur_show = cur if len(cur) <= 100 else cur[:45] + " ... " + cur[-45:]
        self.statusBar().showMessage(f"Files: {files} | Directories: {dirs} | {format_bytes(bs)} | {cur_show}")

    def on_scan_done(self, report: ScanReport, sink: CollectingSink):
        self.btn_scan.setEnabled(True)
        self.progress.setValue(100)
        self.populate_tree(report, sink)
        for err in sink.errors:
            self.log.append(str(err))
        self.summary.setText(describe_report(report))
        self.statusBar().showMessage(f"Scan finished in {report.elapsed_sec:.1f} s.")

    def on_scan_error(self, msg: str):
        self.btn_scan.setEnabled(True)
        self.progress.setValue(0)
        QMessageBox.critical(self, "Scan error", msg)
        self.statusBar().showMessage("Error.")


    # ---------- Tree
    def _parent_item(self, directory: str) -> QTreeWidgetItem:
        item = self._dir_items.get(directory)
        if item is None:
            item = self._dir_items[self._root]
        return item

    def populate_tree(self, report: ScanReport, sink: CollectingSink):
        self.tree.setUpdatesEnabled(False)
        self._root = report.root
        top = QTreeWidgetItem([os.path.abspath(report.root), "directory", "", "", ""])
        self.tree.addTopLevelItem(top)
        self._dir_items = {report.root: top}

        search = report.search
        for ev in sink.events:
            if isinstance(ev, EmittedEntry):
                parent = top if search else self._parent_item(os.path.dirname(ev.path))
                it = self._entry_item(ev, search)
                parent.addChild(it)
                if ev.kind is EntryKind.DIRECTORY:
                    self._dir_items[ev.path] = it
            elif isinstance(ev, RollUp):
                label = f"<{ev.count} {ROLLUP_LABELS.get(ev.kind, ev.kind.value)}>"
                size = format_bytes(ev.total_bytes) if ev.total_bytes is not None else ""
                self._parent_item(ev.directory).addChild(QTreeWidgetItem([label, "", size, "", ""]))

        self.tree.expandToDepth(0)
        self.tree.setUpdatesEnabled(True)

    def _entry_item(self, ev: EmittedEntry, search: bool) -> QTreeWidgetItem:
        info = ev.info
        name = os.path.abspath(ev.path) if search else ev.name
        if ev.kind is EntryKind.SYMLINK:
            name += f" -> {info.target if info.target is not None else '?'}"
        kind = info.special.value.lower() if info.special else ev.kind.value
        size = "" if ev.size is None else format_bytes(ev.size)
        it = QTreeWidgetItem([name, kind, size,
                              format_permissions(info.mode), format_mtime(info.mtime)])
        it.setData(0, Qt.UserRole, ev.path)
        it.setToolTip(0, ev.path)
        return it

    def _tree_path_menu(self, pos):
        item = self.tree.itemAt(pos)
        path = item.data(0, Qt.UserRole) if item else None
        if not path:
            return
        menu = QMenu(self)
        act_reveal = menu.addAction("Show in file manager")
        act_copy = menu.addAction("Copy path")
        chosen = menu.exec(self.tree.viewport().mapToGlobal(pos))
        if chosen is act_reveal:
            reveal_in_file_manager(path)
        elif chosen is act_copy:
            QApplication.clipboard().setText(path)


def run(initial_path: str = ""):
    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setStyleSheet(STYLE_QSS)
    w = MainWindow(initial_path)
    w.show()
    sys.exit(app.exec())
