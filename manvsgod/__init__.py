"""Man vs God - chess-themed moral dilemma game backend"""

__version__ = "0.1.0"
