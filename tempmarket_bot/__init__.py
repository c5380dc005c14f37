"""
Telegram Temperature Market Bot
===============================
A monitoring bot that follows daily highest-temperature prediction markets
for London and NYC and alerts a Telegram chat when the leading prices move.
"""

__version__ = "1.0.0"
__author__ = "Temperature Market Bot"
