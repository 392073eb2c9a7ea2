"""
Helpers for programs built on netc
"""
import sys
from typing import Callable, Any


def run_with_keyboard_interrupt(main_func: Callable[[], Any]) -> None:
    """Call main_func, turning Ctrl+C into exit status 0 and any other error into status 1"""
    try:
        main_func()
    except KeyboardInterrupt:
        print("\n🛑 Interrupted by user (Ctrl+C)")
        sys.exit(0)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)
