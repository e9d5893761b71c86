from .fakes import FakeScrollEventPort
from .pynput import PynputScrollEventPort

__all__ = ["PynputScrollEventPort", "FakeScrollEventPort"]
