"""Shared test fixtures and constants for pingball-jax tests."""
import os


BOARDS_DIR = os.path.join(os.path.dirname(__file__), '..', 'boards')

ALL_BOARDS = ['default', 'flippers']


def board_path(board_name):
    """Path of a sample board file shipped in boards/."""
    return os.path.join(BOARDS_DIR, f'{board_name}.pb')


def board_text(*lines, name='TestBoard'):
    """Join declaration lines under a `board name=...` header."""
    return '\n'.join([f'board name={name}', *lines]) + '\n'
