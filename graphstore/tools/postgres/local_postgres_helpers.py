# graphstore - temporal storage for subgraph dynamic data sources
# Copyright (C) 2026 The graphstore Authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""This module starts a local on-disk postgres instance for use in scripts and tests."""
import glob
import os
import pwd
import shutil
import socket
import subprocess
import tempfile
from typing import Callable, Optional

import attr
from sqlalchemy.engine import URL

from graphstore.utils import environment

LINUX_TEST_DB_OWNER_NAME = "graphstore_test_db_owner"
TEST_POSTGRES_DB_NAME = "graphstore_test_db"
TEST_POSTGRES_USER_NAME = "graphstore_test_usr"

# Debian and Ubuntu do not put the postgres server binaries on the PATH
_POSTGRES_BIN_DIR_GLOB = "/usr/lib/postgresql/*/bin"


@attr.s(frozen=True)
class OnDiskPostgresLaunchResult:
    temp_db_data_dir: str = attr.ib()
    port: int = attr.ib()

    def url(self) -> URL:
        return URL.create(
            drivername="postgresql",
            username=TEST_POSTGRES_USER_NAME,
            host="localhost",
            port=self.port,
            database=TEST_POSTGRES_DB_NAME,
        )


def _get_run_as_user_fn(password_record: pwd.struct_passwd) -> Callable[[], None]:
    """Returns a function that modifes the current OS user and group to those given.

    To be used in preexec_fn when creating new subprocesses."""

    def set_ids() -> None:
        # Must set group id first. If user id is set first, then that user won't have permission to modify the group.
        os.setgid(password_record.pw_gid)
        os.setuid(password_record.pw_uid)

    return set_ids


def _is_root_user() -> bool:
    """Returns True if we are currently running as root, otherwise False."""
    return os.getuid() == 0


def _run_command(
    command: str,
    assert_success: bool = True,
    as_user: Optional[pwd.struct_passwd] = None,
) -> str:
    """Runs the given command.

    Runs the command as a different OS user if `as_user` is not None. If the command succeeds, returns any output from
    stdout. If the command fails and `assert_success` is set, raises an error.
    """
    # pylint: disable=subprocess-popen-preexec-fn
    proc = subprocess.Popen(
        command,
        shell=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        preexec_fn=_get_run_as_user_fn(as_user) if as_user else None,
    )
    try:
        out, err = proc.communicate(timeout=30)
    except subprocess.TimeoutExpired as e:
        proc.kill()
        out, err = proc.communicate()
        raise RuntimeError(f"Command timed out: `{command}`\n{err}\n{out}") from e

    if assert_success and proc.returncode != 0:
        raise RuntimeError(f"Command failed: `{command}`\n{err}\n{out}")
    return out


def _postgres_bin(name: str) -> Optional[str]:
    """Returns the path to the postgres binary |name|, preferring the PATH and
    falling back to the newest installed server version."""
    on_path = shutil.which(name)
    if on_path:
        return on_path
    for bin_dir in sorted(glob.glob(_POSTGRES_BIN_DIR_GLOB), reverse=True):
        candidate = os.path.join(bin_dir, name)
        if os.path.exists(candidate):
            return candidate
    return None


def _get_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("localhost", 0))
        return s.getsockname()[1]


@environment.local_only
def can_start_on_disk_postgresql_database() -> bool:
    return _postgres_bin("pg_ctl") is not None and _postgres_bin("initdb") is not None


@environment.local_only
def start_on_disk_postgresql_database() -> OnDiskPostgresLaunchResult:
    """Starts and initializes a local postgres database for use in tests. Should be
    called in the setUpClass function so this only runs once per test class.

    Returns where the database data lives and which port it listens on.
    """
    if not environment.in_test():
        raise RuntimeError("On-disk postgres databases are only started in tests.")

    pg_ctl = _postgres_bin("pg_ctl")
    if pg_ctl is None:
        raise RuntimeError("Could not find `pg_ctl`, is postgres installed?")
    bin_dir = os.path.dirname(pg_ctl)

    temp_db_data_dir = tempfile.mkdtemp(prefix="postgres")
    port = _get_free_port()

    # The database can't be owned by root so create a separate OS user to own the database if we are currently root.
    password_record = None
    if _is_root_user():
        # This will fail if the user already exists, so we ignore failure.
        _run_command(f"useradd {LINUX_TEST_DB_OWNER_NAME}", assert_success=False)
        # Get the password record for the new user, fails if the user does not exist.
        password_record = pwd.getpwnam(LINUX_TEST_DB_OWNER_NAME)
        os.chown(
            temp_db_data_dir, uid=password_record.pw_uid, gid=password_record.pw_gid
        )

    _run_command(f"{pg_ctl} -D {temp_db_data_dir} initdb", as_user=password_record)

    # Write logs to file so that pg_ctl closes its stdout file descriptor when it moves to the background, otherwise
    # the subprocess will hang. The socket directory is the data directory so we don't depend on /var/run/postgresql.
    _run_command(
        f"{pg_ctl} -D {temp_db_data_dir} -l {temp_db_data_dir}.log -w start "
        f'-o "-p {port} -k {temp_db_data_dir}"',
        as_user=password_record,
    )

    _run_command(
        f"{os.path.join(bin_dir, 'createuser')} -h localhost -p {port} "
        f"{TEST_POSTGRES_USER_NAME}",
        as_user=password_record,
    )
    _run_command(
        f"{os.path.join(bin_dir, 'createdb')} -h localhost -p {port} "
        f"-O {TEST_POSTGRES_USER_NAME} {TEST_POSTGRES_DB_NAME}",
        as_user=password_record,
    )
    return OnDiskPostgresLaunchResult(temp_db_data_dir=temp_db_data_dir, port=port)


@environment.local_only
def stop_and_clear_on_disk_postgresql_database(
    launch_result: OnDiskPostgresLaunchResult, assert_success: bool = True
) -> None:
    """Stops the postgres server and performs rm -rf of the PG data directory.
    Should be called in the tearDownClass function so this only runs once per test class.
    """
    pg_ctl = _postgres_bin("pg_ctl")
    # If the current user is root then the database is owned by a separate OS test user. Run as them to stop the server.
    password_record = (
        pwd.getpwnam(LINUX_TEST_DB_OWNER_NAME) if _is_root_user() else None
    )
    _run_command(
        f"{pg_ctl} -D {launch_result.temp_db_data_dir} -w stop",
        as_user=password_record,
        assert_success=assert_success,
    )
    shutil.rmtree(launch_result.temp_db_data_dir, ignore_errors=True)
