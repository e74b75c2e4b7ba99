import json
import logging
import os
from pathlib import Path

DEFAULT_PALETTE = ["#007acc", "#89d185", "#e2c08d", "#f48771", "#c586c0", "#4ec9b0", "#ce9178"]


def default_config_dir() -> str:
    return os.environ.get("GIT_GRAPH_CONFIG_DIR") or os.path.join(str(Path.home()), ".git_graph")


class Settings:
    def __init__(self, config_dir: str | None = None):
        self.config_dir = config_dir or default_config_dir()
        self.config_file = os.path.join(self.config_dir, "settings.json")

        # 默认设置
        self.settings = {
            "recent_folders": [],  # 最近打开的文件夹列表
            "last_folder": None,  # 上次打开的文件夹
            "max_recent": 10,  # 最大记录数
            "log_depth": 100,  # 每个分支读取的最大提交数
            "lane_width": 20,  # 每条泳道的水平间距
            "dot_radius": 6,  # 提交圆点半径
            "row_height": 50,  # 每行提交的高度
            "palette": list(DEFAULT_PALETTE),
        }

        # 加载已有设置
        self.load_settings()

    def load_settings(self):
        """加载设置"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r", encoding="utf-8") as f:
                    saved_settings = json.load(f)
                    self.settings.update(saved_settings)
        except (OSError, ValueError) as e:
            logging.warning("加载设置失败：%s", e)

    def save_settings(self):
        """保存设置"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logging.warning("保存设置失败：%s", e)

    def add_recent_folder(self, folder_path):
        """添加最近打开的文件夹"""
        self.settings["last_folder"] = folder_path

        recent = self.settings["recent_folders"]
        if folder_path in recent:
            recent.remove(folder_path)
        recent.insert(0, folder_path)
        self.settings["recent_folders"] = recent[: self.settings["max_recent"]]

        self.save_settings()

    def get_recent_folders(self):
        """获取最近文件夹列表"""
        return self.settings["recent_folders"]

    def get_last_folder(self):
        """获取上次打开的文件夹"""
        return self.settings["last_folder"]

    def get_log_depth(self) -> int:
        return int(self.settings.get("log_depth", 100))

    def set_log_depth(self, depth: int):
        self.settings["log_depth"] = depth
        self.save_settings()

    def get_graph_style(self) -> dict:
        """Rendering constants of the commit graph. They never affect lane assignment."""
        return {
            "lane_width": self.settings.get("lane_width", 20),
            "dot_radius": self.settings.get("dot_radius", 6),
            "row_height": self.settings.get("row_height", 50),
            "palette": self.settings.get("palette") or list(DEFAULT_PALETTE),
        }


# 创建全局settings实例
settings = Settings()
