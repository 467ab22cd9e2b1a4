import os


# No simulated thinking pause in tests.
os.environ.setdefault("INSIGHTS_THINKING_DELAY_MS", "0")
os.environ.setdefault("INSIGHTS_THINKING_JITTER_MS", "0")
os.environ.setdefault("INSIGHTS_VALIDATE_RESULTS", "1")
