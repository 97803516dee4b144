""" Allow 'python -m reboot_to' """
from reboot_to.main import run

run()
