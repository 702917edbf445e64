# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Mount utilities for the bucketfs FUSE adapter.

This module provides functions for unmounting, signal handling and the
mount options used when exposing a bucket as a local filesystem.
"""

import sys
import signal
import subprocess
import time
from bucketfs.fs.utils import logger, time_function

# Seconds the kernel may cache attributes and lookups
ATTR_TIMEOUT = 1.0

def unmount(mountpoint):
    """
    Unmount the filesystem using fusermount (Linux).

    Args:
        mountpoint (str): Path where the filesystem is mounted
    """
    logger.info(f"Unmounting filesystem at {mountpoint}")
    start_time = time.time()

    # Normalize mountpoint (remove trailing slash)
    mountpoint = mountpoint.rstrip('/')
    try:
        cp = subprocess.run(["mountpoint", "-q", mountpoint])
        if cp.returncode != 0:
            logger.warning(f"{mountpoint} is not mounted, nothing to unmount.")
            time_function("unmount", start_time)
            return

        subprocess.run(["fusermount", "-u", mountpoint], check=True)
        logger.info(f"Unmounted {mountpoint} gracefully.")
        time_function("unmount", start_time)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error(f"Error during unmounting: {e}")
        time_function("unmount", start_time)

def setup_signal_handlers(mountpoint, unmount_func):
    """
    Set up signal handlers for graceful unmounting.

    Args:
        mountpoint (str): Path where the filesystem is mounted
        unmount_func (callable): Function to call for unmounting

    Returns:
        callable: The signal handler function
    """
    def signal_handler(sig, frame):
        logger.info(f"Signal {sig} received, unmounting...")
        unmount_func(mountpoint)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    return signal_handler

def get_mount_options(foreground=True, allow_other=False):
    """
    Get mount options for FUSE.

    Reads and writes bypass the page cache (``direct_io``) and attribute
    caching is kept short. ``atomic_o_trunc`` passes ``O_TRUNC`` to ``open``
    instead of issuing a separate truncate call.

    Args:
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.

    Returns:
        dict: Dictionary of mount options
    """
    options = {
        'foreground': foreground,
        'default_permissions': True,
        'direct_io': True,
        'atomic_o_trunc': True,
        'entry_timeout': ATTR_TIMEOUT,
        'negative_timeout': ATTR_TIMEOUT,
        'attr_timeout': ATTR_TIMEOUT,
    }

    # Only add allow_other if explicitly requested
    if allow_other:
        options['allow_other'] = True

    return options
