#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Colorful output on the command line interface.
"""

import sys


class CLI:
    """
    Class to print colorful text on the command line interface.
    """

    PURPLE = '\033[95m'
    BLUE = '\033[94m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    _END = '\033[0m'

    color = True

    @classmethod
    def _fmt(cls, *codes: str) -> tuple:
        """
        Returns the start and end sequence for the given codes,
        or two empty strings if colors are switched off.
        """
        if not cls.color:
            return '', ''
        return ''.join(codes), cls._END

    @classmethod
    def print(cls, text: str = '', **kwargs) -> None:
        print(text, **kwargs)

    @classmethod
    def print_info(cls, text: str = '', end: str = '\n') -> None:
        start, stop = cls._fmt(cls.BLUE, cls.BOLD)
        print(f'{start}{text}{stop}', end=end)

    @classmethod
    def print_important(cls, text: str = '', end: str = '\n') -> None:
        start, stop = cls._fmt(cls.PURPLE, cls.BOLD)
        print(f'{start}{text}{stop}', end=end, flush=True)

    @classmethod
    def warn(cls, text: str = '') -> None:
        start, stop = cls._fmt(cls.YELLOW)
        print(f'[{start}WARN{stop}] {text}', file=sys.stderr)

    @classmethod
    def fail(cls, text: str = '') -> None:
        start, stop = cls._fmt(cls.RED)
        bold, unbold = cls._fmt(cls.BOLD)
        print(f'[{start}FAIL{stop}] {bold}{text}{unbold}', file=sys.stderr)

    @classmethod
    def exit_on_error(cls, text: str, exitcode: int = 1):
        start, stop = cls._fmt(cls.RED)
        print(f'{start}{text}{stop}', file=sys.stderr)
        sys.exit(exitcode)
