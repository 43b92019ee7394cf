#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Interactive questions to the user.
"""

import readchar

from console import CLI


class UserInput:
    """
    Asks the user and waits for a key press.
    """

    def prompt_with_options(self, message: str, default: str, *options: str) -> str:
        """
        Prints the message with the options and waits for a key matching
        one of the options (case-insensitive) or Enter for the default.
        Other keys are ignored. Returns the chosen option.
        """
        CLI.print_important(f'''{message} [{', '.join(options)}]: ''', end='')
        while True:
            key = readchar.readkey()
            if key in (readchar.key.CR, readchar.key.LF):
                choice = default
            else:
                choice = next((option for option in options if option.lower() == key.lower()), None)
                if choice is None:
                    continue
            CLI.print(choice)
            return choice
