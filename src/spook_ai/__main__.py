"""Module entrypoint for `python -m spook_ai`."""

if __package__ is None or __package__ == "":
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from spook_ai.run_area import run_training_area


if __name__ == "__main__":
    run_training_area()
