# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
import os
import sys

from bucketfs import S3Fs

def main():
    if len(sys.argv) != 2:
        print("Usage: python basic_operations.py <bucket>")
        sys.exit(1)

    fs = S3Fs(sys.argv[1])

    try:
        # Create a directory and a file inside it
        fs.mkdir("/reports")
        with fs.create("/reports/hello.txt") as f:
            f.write(b"Hello, World!")
        print("Wrote /reports/hello.txt")

        # Get file metadata
        info = fs.stat("/reports/hello.txt")
        print(f"File size: {info.size} bytes")
        print(f"Last modified: {info.mod_time}")

        # Ranged read without downloading the whole object
        with fs.open("/reports/hello.txt") as f:
            f.seek(7, os.SEEK_SET)
            print(f"Read from offset 7: {f.read(5).decode()}")

        # List the directory
        with fs.open("/reports") as d:
            print("Entries in /reports:")
            for entry in d.readdir(0):
                kind = "dir" if entry.is_dir else "file"
                print(f"- {entry.name} ({kind}, {entry.size} bytes)")

        # Rename, then remove everything
        fs.rename("/reports/hello.txt", "/reports/greeting.txt")
        print("Renamed to /reports/greeting.txt")
        fs.remove_all("/reports")
        print("Removed /reports")

    finally:
        fs.client.close()

if __name__ == "__main__":
    main()
