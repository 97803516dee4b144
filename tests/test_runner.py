# tests/test_runner.py - command runner and exit status classification tests.
import unittest
import subprocess
from unittest import mock

from reboot_to.errors import (ExecutableNotFound, ListingFailure,
                              PermissionDenied, SubprocessFailure)
from reboot_to.runner import CommandResult, CommandRunner, raise_for_status


def _completed(returncode=0, stdout=b'', stderr=b''):
    return subprocess.CompletedProcess(args=[], returncode=returncode,
                                       stdout=stdout, stderr=stderr)


class CommandRunnerTests(unittest.TestCase):
    @mock.patch('reboot_to.runner.shutil.which', return_value=None)
    def test_missing_program(self, _which):
        with self.assertRaises(ExecutableNotFound) as cm:
            CommandRunner().run('efibootmgr', [])
        self.assertEqual(cm.exception.prog, 'efibootmgr')

    @mock.patch('reboot_to.runner.subprocess.run')
    @mock.patch('reboot_to.runner.shutil.which', return_value='/usr/bin/efibootmgr')
    def test_run_captures_output(self, _which, run):
        run.return_value = _completed(0, b'Boot0001* A\n', b'')
        res = CommandRunner().run('efibootmgr', ['--bootnext', '0001'])
        run.assert_called_once_with(['/usr/bin/efibootmgr', '--bootnext', '0001'],
                                    capture_output=True, check=False)
        self.assertTrue(res.ok)
        self.assertEqual(res.argv, ('efibootmgr', '--bootnext', '0001'))
        self.assertEqual(res.text(), 'Boot0001* A\n')

    @mock.patch('reboot_to.runner.subprocess.run')
    @mock.patch('reboot_to.runner.shutil.which', return_value='/usr/bin/efibootmgr')
    def test_nonzero_exit_is_not_raised(self, _which, run):
        run.return_value = _completed(3, b'', b'oops\n')
        res = CommandRunner().run('efibootmgr', [])
        self.assertFalse(res.ok)
        self.assertEqual(res.stderr, 'oops\n')

    @mock.patch('reboot_to.runner.subprocess.run', side_effect=PermissionError(13, 'Permission denied'))
    @mock.patch('reboot_to.runner.shutil.which', return_value='/sbin/shutdown')
    def test_exec_refused(self, _which, _run):
        with self.assertRaises(PermissionDenied):
            CommandRunner().run('shutdown', ['-r', 'now'])

    @mock.patch('reboot_to.runner.subprocess.run', side_effect=FileNotFoundError(2, 'gone'))
    @mock.patch('reboot_to.runner.shutil.which', return_value='/sbin/shutdown')
    def test_program_vanished(self, _which, _run):
        with self.assertRaises(ExecutableNotFound):
            CommandRunner().run('shutdown', ['-r', 'now'])


class RaiseForStatusTests(unittest.TestCase):
    def _res(self, returncode, stderr='', stdout=b''):
        return CommandResult(argv=('efibootmgr', '--bootnext', '0001'),
                             returncode=returncode, stdout=stdout, stderr=stderr)

    def test_ok_passes_through(self):
        res = self._res(0)
        self.assertIs(raise_for_status(res), res)

    def test_permission_messages(self):
        for msg in ('Could not set BootNext: Permission denied',
                    'efibootmgr: Operation not permitted',
                    'shutdown: Must be root.',
                    'Interactive authentication required.'):
            with self.assertRaises(PermissionDenied, msg=msg):
                raise_for_status(self._res(1, stderr=msg))

    def test_permission_message_on_stdout(self):
        with self.assertRaises(PermissionDenied):
            raise_for_status(self._res(1, stdout=b'Permission denied\n'))

    def test_generic_failure(self):
        with self.assertRaises(SubprocessFailure) as cm:
            raise_for_status(self._res(7, stderr='bad things'))
        self.assertNotIsInstance(cm.exception, PermissionDenied)
        self.assertEqual(cm.exception.exit_code, 9)
        self.assertIn('bad things', str(cm.exception))

    def test_failure_class(self):
        with self.assertRaises(ListingFailure):
            raise_for_status(self._res(2), failure=ListingFailure)
