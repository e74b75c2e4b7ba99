from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QFrame, QLabel, QPushButton, QSizePolicy, QVBoxLayout

HIDE_AFTER_MS = 7000


class NotificationWidget(QFrame):
    """Dismissable error banner shown in the top-right corner of its parent."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.setFixedWidth(300)
        self.setMinimumHeight(50)
        self.setStyleSheet("""
            NotificationWidget {
                background-color: #f0f0f0;
                border: 1px solid #ccc;
                border-radius: 5px;
            }
        """)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.hide()

        layout = QVBoxLayout(self)

        self.message_label = QLabel()
        self.message_label.setTextFormat(Qt.TextFormat.PlainText)  # git errors may echo untrusted text
        self.message_label.setWordWrap(True)
        self.message_label.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        self.close_button = QPushButton("Close")
        self.close_button.clicked.connect(self.hide_widget)
        self.close_button.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

        layout.addWidget(self.message_label)
        layout.addWidget(self.close_button, alignment=Qt.AlignmentFlag.AlignRight)

        self.hide_timer = QTimer(self)
        self.hide_timer.setSingleShot(True)
        self.hide_timer.timeout.connect(self.hide_widget)

    def show_message(self, message: str):
        self.message_label.setText(message)
        self.adjustSize()
        if self.parentWidget():
            parent_rect = self.parentWidget().rect()
            self.move(parent_rect.right() - self.width() - 10, 10)
        self.show()
        self.hide_timer.start(HIDE_AFTER_MS)
        self.raise_()

    def hide_widget(self):
        self.hide()
        if self.hide_timer.isActive():
            self.hide_timer.stop()
