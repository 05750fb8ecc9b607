from flashdeck.app import AppSettings, run_report

__all__ = ["main"]


def main() -> None:
    """Entry point for the application."""
    settings = AppSettings.from_env()
    run_report(settings)


if __name__ == "__main__":
    main()
