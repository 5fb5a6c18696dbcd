"""C++クラスのリソースライフサイクル呼び出し対応を検査する静的解析ツール。"""

__version__ = "0.1.0"
