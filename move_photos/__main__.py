"""Allow running as: python -m move_photos SOURCE DESTINATION"""
from .cli import main

main()
