"""DB repositories: sync functions over one session each."""

from threadmail.db.repositories import template_repo, thread_repo, user_repo
from threadmail.db.repositories.thread_repo import (
    folder_counts,
    get_thread,
    list_folders,
    list_threads,
    move_thread,
    move_to_archive,
    move_to_trash,
    send_single,
)
from threadmail.db.repositories.user_repo import list_directory

__all__ = [
    "template_repo",
    "thread_repo",
    "user_repo",
    "send_single",
    "move_thread",
    "move_to_archive",
    "move_to_trash",
    "list_folders",
    "folder_counts",
    "list_threads",
    "get_thread",
    "list_directory",
]
