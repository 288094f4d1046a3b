"""
Application runtime information.
"""

import os
from typing import Optional

DEFAULT_APP_NAME = "xizlr"


class ApplicationRuntime:
    """Holds the name and root directory of the running application."""

    def __init__(self, name: str = DEFAULT_APP_NAME, root_directory: Optional[str] = None):
        self.name = name
        self.root_directory = root_directory if root_directory is not None else os.getcwd()

    @classmethod
    def from_environment(cls, name: Optional[str] = None, root_directory: Optional[str] = None) -> "ApplicationRuntime":
        """Create a runtime, falling back to the environment for missing values.

        Args:
            name: Application name, defaults to ``XIZLR_APP_NAME`` or "xizlr"
            root_directory: Root directory, defaults to ``XIZLR_ROOT_DIR`` or the
                current working directory
        """
        if name is None:
            name = os.environ.get("XIZLR_APP_NAME", DEFAULT_APP_NAME)
        if root_directory is None:
            root_directory = os.environ.get("XIZLR_ROOT_DIR") or os.getcwd()
        return cls(name=name, root_directory=root_directory)

    def get_name(self) -> str:
        return self.name

    def set_name(self, name: str) -> None:
        self.name = name

    def get_root_directory(self) -> str:
        return self.root_directory
