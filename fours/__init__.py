"""
fours – read 4chan boards from the terminal.

Supports:
  • Browsing a board's catalog interactively (curses list → pager)
  • Opening a single thread by number or by subject search
  • Paging a rendered thread or writing it to a text file
"""
