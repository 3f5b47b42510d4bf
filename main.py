"""Точка входа: python main.py {generate,run} ..."""

from dkmeans.main import main

if __name__ == "__main__":
    raise SystemExit(main())
