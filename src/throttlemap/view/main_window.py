"""
Main Application Window
=======================
Holds the curve plot and the small toolbar around it.

Why is this file needed?
------------------------
1. Layout: Plot in the centre, method selector and scale factor on top.
2. Routing: Connects reset and export actions to the store.
"""
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox,
    QDoubleSpinBox, QPushButton, QMessageBox, QApplication
)

from throttlemap.app.application import VISIBLE_APP_NAME
from throttlemap.app.state import CurveStore
from throttlemap.model.interpolation import all_identifiers
from throttlemap.view.curve_widget import CurvePlotWidget


class MainWindow(QMainWindow):
    def __init__(self, store: CurveStore, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.store = store
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1000, 700)

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        layout = QVBoxLayout(main_widget)

        # --- TOOLBAR ROW ---
        row = QHBoxLayout()
        row.addWidget(QLabel("Interpolation:"))
        self.combo_method = QComboBox()
        self.combo_method.addItems(all_identifiers())
        self.combo_method.setCurrentText(store.curve.method_identifier or "")
        self.combo_method.currentTextChanged.connect(store.set_interpolation_method)
        row.addWidget(self.combo_method)

        row.addWidget(QLabel("Scale factor:"))
        self.spin_scale = QDoubleSpinBox()
        self.spin_scale.setRange(0.0, 2.0)
        self.spin_scale.setSingleStep(0.05)
        self.spin_scale.setValue(store.curve.scale_factor)
        self.spin_scale.valueChanged.connect(store.set_scale_factor)
        row.addWidget(self.spin_scale)

        row.addStretch()
        self.btn_reset = QPushButton("Reset")
        self.btn_reset.clicked.connect(store.reset)
        row.addWidget(self.btn_reset)
        self.btn_export = QPushButton("Export to clipboard")
        self.btn_export.clicked.connect(self.on_export)
        row.addWidget(self.btn_export)
        layout.addLayout(row)

        # --- PLOT ---
        self.plot = CurvePlotWidget(store)
        layout.addWidget(self.plot, 1)

        self.statusBar().showMessage("Click to add a point, Backspace toggles delete mode, Esc resets.")
        store.deadzone_changed.connect(self._on_deadzone_changed)
        store.delete_mode_changed.connect(self._on_delete_mode_changed)
        store.interpolation_changed.connect(self._on_interpolation_changed)

    def _on_deadzone_changed(self, position: int) -> None:
        self.statusBar().showMessage(f"Deadzone: {self.store.curve.deadzone.label()}")

    def _on_delete_mode_changed(self, enabled: bool) -> None:
        self.statusBar().showMessage("Delete mode" if enabled else "Edit mode")

    def _on_interpolation_changed(self, identifier: str) -> None:
        if self.combo_method.currentText() != identifier:
            self.combo_method.blockSignals(True)
            self.combo_method.setCurrentText(identifier)
            self.combo_method.blockSignals(False)

    def on_export(self) -> None:
        result = self.store.export()
        if result is None:
            QMessageBox.warning(self, "Export", "Select an interpolation method before exporting.")
            return
        QApplication.clipboard().setText(result.code)
        if result.warnings:
            QMessageBox.warning(self, "Export", "Copied to clipboard with warnings:\n\n" + "\n".join(result.warnings))
        else:
            QMessageBox.information(self, "Export", f"Copied {len(result.table)} entries to clipboard.")
