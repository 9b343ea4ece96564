"""Console entry point for taskledger.

Installed as the ``taskledger`` script. Storage comes from
~/.taskledger/config.json unless TASKLEDGER_HOME or
TASKLEDGER_DATABASE_URL say otherwise, e.g.:

    TASKLEDGER_DATABASE_URL=sqlite:///work.db taskledger task list --overdue
    python -m taskledger.interfaces.cli.main tag list
"""

from taskledger.interfaces.cli import app


def main() -> None:
    app(prog_name="taskledger")


if __name__ == "__main__":
    main()
