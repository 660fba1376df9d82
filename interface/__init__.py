"""
Interface package: text front ends for the chess rules kernel.

Modules:
    console — Line-oriented play loop driving a GameSession.
              Reads commands from stdin, writes replies to stdout.
              Run with: python -m interface.console
"""
