"""Tool categories, used to group tools when they are listed."""

from enum import Enum


class ToolCategory(str, Enum):
    NAVIGATION = "navigation"
    NETWORK = "network"
    DEBUGGING = "debugging"
    REVERSE_ENGINEERING = "reverse_engineering"


CATEGORY_LABELS = {
    ToolCategory.NAVIGATION: "Navigation automation",
    ToolCategory.NETWORK: "Network",
    ToolCategory.DEBUGGING: "Debugging",
    ToolCategory.REVERSE_ENGINEERING: "JS Reverse Engineering",
}


__all__ = ["ToolCategory", "CATEGORY_LABELS"]
