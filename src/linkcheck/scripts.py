"""
Post-install script for setting up browser dependencies.

Downloads the Chromium build Playwright needs. Exposed as the
``linkcheck-install-browsers`` command.
"""
import subprocess
import sys


def postinstall() -> int:
    """
    Run ``playwright install chromium``.

    Returns:
        Process exit code (0 on success)
    """
    print("Running 'playwright install chromium'...")
    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "install", "chromium"],
            check=True,
            capture_output=True,
            text=True
        )
        if result.stdout:
            print(result.stdout)
        print("Chromium browser installed successfully.")
        return 0
    except subprocess.CalledProcessError as e:
        print(f"Error installing Chromium browser for Playwright: {e}", file=sys.stderr)
        if e.stderr:
            print(e.stderr, file=sys.stderr)
        print(
            "Please run the following command manually:\n"
            "  python -m playwright install chromium",
            file=sys.stderr
        )
        return 1
    except FileNotFoundError as e:
        print(f"Error: Could not find Python executable: {e}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(postinstall())


if __name__ == "__main__":
    main()
