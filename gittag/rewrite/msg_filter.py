"""Message filter run by ``git filter-branch --msg-filter``.

filter-branch feeds the original message on stdin and exports the commit
being rewritten as ``$GIT_COMMIT``. The new subject comes from the JSON
message map named by ``$GITTAG_MESSAGE_MAP``; commits missing from the map
are written back untouched. Only the subject line is replaced.
"""

import json
import os
import sys

MESSAGE_MAP_ENV = "GITTAG_MESSAGE_MAP"


def load_message_map(path: str) -> dict[str, str]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def rewrite_message(message: str, new_subject: str) -> str:
    """Replace the first line of ``message``, keeping the body and trailing newline."""
    subject, sep, rest = message.partition("\n")
    return new_subject + sep + rest


def filter_message(message: str, commit: str, message_map: dict[str, str]) -> str:
    new_subject = message_map.get(commit)
    if new_subject is None:
        return message
    return rewrite_message(message, new_subject)


def main() -> int:
    # Bytes in, bytes out: commit messages are not guaranteed to match the locale
    message = sys.stdin.buffer.read().decode("utf-8", errors="surrogateescape")
    commit = os.environ.get("GIT_COMMIT", "")
    map_path = os.environ.get(MESSAGE_MAP_ENV)
    message_map = load_message_map(map_path) if map_path else {}
    result = filter_message(message, commit, message_map)
    sys.stdout.buffer.write(result.encode("utf-8", errors="surrogateescape"))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
