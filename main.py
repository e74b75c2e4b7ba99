import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from git_manager_window import GitManagerWindow
from settings import settings


def main():
    app = QApplication(sys.argv)

    window = GitManagerWindow()
    window.show()
    window.activateWindow()
    window.raise_()

    repo_path = sys.argv[1] if len(sys.argv) > 1 else settings.get_last_folder()
    if repo_path:
        window.open_folder(repo_path)

    sys.exit(app.exec())


if __name__ == "__main__":
    # 根据环境变量设置日志级别
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"
    )
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("git_graph.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
    main()
