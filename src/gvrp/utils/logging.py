"""Coloured console logging and a tqdm progress bar for instance batches."""
import logging
from tqdm import tqdm

class Colors:
    """ANSI color codes for prettier output."""
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    BLUE = '\033[34m'
    GRAY = '\033[37m'
    BOLD = '\033[1m'
    RESET = '\033[0m'

class Symbols:
    """Unicode symbols for status indicators."""
    CHECK = '✓'
    CROSS = '✗'
    TRUCK = '🚛'

class SimpleFormatter(logging.Formatter):
    """Colours the bare message by level; no timestamp or logger name."""
    LEVEL_COLORS = {
        'DEBUG': Colors.GRAY,
        'INFO': Colors.CYAN,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.RED + Colors.BOLD,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelname, Colors.RESET)
        return f"{color}{record.getMessage()}{Colors.RESET}"

def setup_logging(level=logging.INFO):
    """Install a single coloured console handler on the root logger.

    Warnings issued through the ``warnings`` module (reference gaps found while
    building an instance) are routed through the same handler.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(SimpleFormatter())
    root.addHandler(console)
    logging.captureWarnings(True)

class ProgressTracker:
    """Progress bar over a list of instance files, one ``advance`` per file."""
    STATUS_PREFIX = {
        'success': f"{Colors.GREEN}{Symbols.CHECK}",
        'error': f"{Colors.RED}{Symbols.CROSS}",
    }

    def __init__(self, steps, desc="Loading instances"):
        self.steps = steps
        self.pbar = tqdm(
            total=len(steps),
            desc=f"{Colors.BLUE}{Symbols.TRUCK} {desc}{Colors.RESET}",
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt}"
        )
        self.current = 0

    def advance(self, message=None, status='success'):
        """Count one finished file, writing ``message`` above the bar if given."""
        if message:
            prefix = self.STATUS_PREFIX.get(status, '')
            self.pbar.write(f"{prefix} {message}{Colors.RESET}")
        self.current += 1
        self.pbar.update(1)

    def close(self):
        self.pbar.write(f"\n{Colors.GREEN}{Symbols.CHECK} {self.current}/{len(self.steps)} instances processed{Colors.RESET}\n")
        self.pbar.close()
