"""Text of the scripts and descriptors written for the running container."""

from __future__ import annotations

import textwrap
from typing import Dict


def rewrite_apachectl(text: bytes, deps_idx: str) -> bytes:
    """Point a relocated apachectl at ``$DEPS_DIR/<idx>/httpd``.

    The single-quoted HTTPD assignment is switched to double quotes first so
    the shell expands the ``$DEPS_DIR`` reference introduced by the second
    replacement.
    """
    text = text.replace(b"HTTPD='/app/httpd/bin/httpd'", b'HTTPD="/app/httpd/bin/httpd"')
    return text.replace(b"/app/httpd/", f"$DEPS_DIR/{deps_idx}/httpd/".encode("utf-8"))


def verify_command(deps_idx: str) -> str:
    return f'varify "$DEPS_DIR/{deps_idx}/php/etc/" "$DEPS_DIR/{deps_idx}/httpd/conf/"'


def profile_d_script(deps_idx: str, admin_email: str, has_ini_scan_dir: bool) -> str:
    lines = [
        f"export PHPRC=$DEPS_DIR/{deps_idx}/php/etc",
        f"export HTTPD_SERVER_ADMIN={admin_email}",
    ]
    if has_ini_scan_dir:
        lines.append(f"export PHP_INI_SCAN_DIR=$DEPS_DIR/{deps_idx}/php/etc/php.ini.d")
    lines.append(verify_command(deps_idx))
    return "\n".join(lines) + "\n"


def start_script(deps_idx: str, verify_first: bool = False) -> str:
    """php-fpm in the background, httpd in the foreground."""
    etc = f"$DEPS_DIR/{deps_idx}/php/etc"
    conf = f"$DEPS_DIR/{deps_idx}/httpd/conf"
    body = textwrap.dedent(f"""\
        $DEPS_DIR/{deps_idx}/php/sbin/php-fpm -p "{etc}" -y "{etc}/php-fpm.conf" -c "{etc}" &
        $DEPS_DIR/{deps_idx}/httpd/bin/apachectl -f "{conf}/httpd.conf" -k start -DFOREGROUND
        """)
    header = "#!/usr/bin/env bash\n"
    if verify_first:
        header += verify_command(deps_idx) + "\n"
    return header + body


def release_descriptor(deps_idx: str, script_name: str) -> Dict[str, Dict[str, str]]:
    return {"default_process_types": {"web": f"$DEPS_DIR/{deps_idx}/bin/{script_name}"}}
