"""Shared fixtures for the reboot-to tests."""
from reboot_to.errors import ExecutableNotFound
from reboot_to.runner import CommandResult

LISTING = (
    "BootCurrent: 0001\n"
    "Timeout: 1 seconds\n"
    "BootOrder: 0001,0002,0003\n"
    "Boot0001* Windows Boot Manager\tHD(1,GPT,25d2dea1-9f68-1644-91dd-4836c0b3a30a,0x800,0x32000)"
    "/\\EFI\\Microsoft\\Boot\\bootmgfw.efi\n"
    "Boot0002  Ubuntu\tHD(4,GPT,cd15e3b1-1f8b-4c2a-9b0b-3f0e4f0e1d21,0x1000,0x100000)"
    "/\\EFI\\ubuntu\\shimx64.efi\n"
    "Boot0003* UEFI: Built-in EFI Shell\tFvVol(7cb8bdc9-f8eb-4f34-aaea-3ee4af6516a1)"
    "/FvFile(7c04a583-9e3e-4f1c-ad65-e05268d0b4d1)\n"
)

SIMPLE_LISTING = "Boot0001* Windows Boot Manager\nBoot0002  Ubuntu\n"


class FakeRunner:
    """Stands in for CommandRunner: canned results, records every call.

    'results' maps a program name, or a (program, first-arg) tuple, to a
    CommandResult (or an exception to raise); unknown programs succeed
    with no output.
    """
    def __init__(self, results=None, missing=()):
        self.results = dict(results or {})
        self.missing = set(missing)
        self.calls = []

    def which(self, command):
        return None if command in self.missing else f'/usr/bin/{command}'

    def run(self, command, args):
        if command in self.missing:
            raise ExecutableNotFound(command)
        self.calls.append((command, *args))
        res = self.results.get((command, *args[:1]), self.results.get(command))
        if isinstance(res, BaseException):
            raise res
        if res is None:
            return CommandResult(argv=(command, *args), returncode=0)
        return CommandResult(argv=(command, *args), returncode=res.returncode,
                             stdout=res.stdout, stderr=res.stderr)

    def programs(self):
        return [call[0] for call in self.calls]


def result(returncode=0, stdout=b'', stderr=''):
    if isinstance(stdout, str):
        stdout = stdout.encode('utf-8')
    return CommandResult(argv=(), returncode=returncode, stdout=stdout,
                         stderr=stderr)


def listing_runner(text=LISTING, **kwargs):
    """A FakeRunner whose efibootmgr prints 'text' when listing."""
    runner = FakeRunner(**kwargs)
    runner.results.setdefault('efibootmgr', result(stdout=text))
    return runner
