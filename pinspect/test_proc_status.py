import tempfile
import unittest

from pinspect import proc_status, util
from pinspect.errors import NotFound
from pinspect.fakeproc import FakeProc

NGINX_STATUS = """\
Name:\tnginx
Umask:\t0022
State:\tS (sleeping)
Tgid:\t321
Pid:\t321
PPid:\t1
Uid:\t33\t33\t33\t33
Gid:\t33\t34\t33\t33
VmPeak:\t   60000 kB
VmSize:\t   55000 kB
VmRSS:\t    8123 kB
Threads:\t4
Cpus_allowed_list:\t0-7
"""

ZOMBIE_STATUS = """\
Name:\tdefunct
State:\tZ (zombie)
PPid:\t321
Uid:\t0\t0\t0\t0
Gid:\t0\t0\t0\t0
Threads:\t1
"""


class TestProcStatus(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.proc = FakeProc(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_read_status(self):
        self.proc.add_status(321, NGINX_STATUS)
        info = proc_status.read_proc_status(321, proc_root=self.tmp.name)
        self.assertEqual(info.pid, 321)
        self.assertEqual(info.name, "nginx")
        self.assertEqual(info.state, util.STATE_SLEEPING)
        self.assertEqual(info.ppid, 1)
        self.assertEqual((info.uid_real, info.uid_effective), (33, 33))
        self.assertEqual((info.gid_real, info.gid_effective), (33, 34))
        self.assertEqual(info.vm_peak_kb, 60000)
        self.assertEqual(info.vm_size_kb, 55000)
        self.assertEqual(info.vm_rss_kb, 8123)
        self.assertEqual(info.thread_count, 4)

    def test_zombie_has_no_memory(self):
        self.proc.add_status(400, ZOMBIE_STATUS)
        info = proc_status.read_proc_status(400, proc_root=self.tmp.name)
        self.assertEqual(info.state, util.STATE_ZOMBIE)
        self.assertEqual((info.vm_size_kb, info.vm_rss_kb, info.vm_peak_kb), (0, 0, 0))
        self.assertEqual(info.thread_count, 1)

    def test_garbage_lines_are_ignored(self):
        info = proc_status.parse_status(
            ["no colon here\n", "Threads:\tmany\n", "Uid:\t5\n", "State:\n", "Name:\tx\n"],
            proc_status.ProcessInfo(9),
        )
        self.assertEqual(info.name, "x")
        self.assertEqual(info.thread_count, 0)
        self.assertEqual(info.uid_real, 0)
        self.assertEqual(info.state, util.STATE_UNKNOWN)

    def test_missing_process(self):
        with self.assertRaises(NotFound):
            proc_status.read_proc_status(77, proc_root=self.tmp.name)


class TestUtil(unittest.TestCase):
    def test_parse_pid(self):
        self.assertEqual(util.parse_pid("1234"), 1234)
        self.assertEqual(util.parse_pid("2147483647"), 2147483647)
        for bad in ("", "0", "-5", "12a", "1.5", "²", "abc", " 42", "42\n",
                    "2147483648", "99999999999999999999"):
            with self.subTest(text=bad):
                with self.assertRaises(ValueError):
                    util.parse_pid(bad)

    def test_state_strings(self):
        self.assertEqual(util.state_to_string(util.char_to_state("R")), "Running")
        self.assertEqual(util.state_to_string(util.char_to_state("D")), "Disk Sleep")
        self.assertEqual(util.state_to_string(util.char_to_state("I")), "Idle")
        self.assertEqual(util.state_to_string(util.char_to_state("X")), "Unknown")

    def test_proc_path(self):
        self.assertEqual(str(util.proc_path(12, "fd")), "/proc/12/fd")
        self.assertEqual(str(util.proc_path(12, proc_root="/host/proc")), "/host/proc/12")


if __name__ == "__main__":
    unittest.main()
