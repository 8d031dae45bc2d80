# Bradford Arrington 2025
import os
import sys
import time
import tracemalloc

import psutil

from bitio import CompressorBitio
from huff import COMPRESSION_NAME, USAGE, expand_file

_printed_header = False


def track_performance(name, func, *args, **kwargs):
    global _printed_header

    process = psutil.Process(os.getpid())
    start_time = time.time()
    start_cpu = process.cpu_times().user
    tracemalloc.start()
    start_mem = tracemalloc.get_traced_memory()[0]

    try:
        result = func(*args, **kwargs)
        end_mem = tracemalloc.get_traced_memory()[1]
    finally:
        tracemalloc.stop()
    end_cpu = process.cpu_times().user
    end_time = time.time()

    wall_time_ms = (end_time - start_time) * 1000
    cpu_time_ms = (end_cpu - start_cpu) * 1000
    mem_used_kb = (end_mem - start_mem) / 1024

    if not _printed_header:
        print(f"\n{'Function':<20} {'Wall Time (ms)':>15} {'CPU Time (ms)':>15} {'Memory Used (KB)':>20}")
        _printed_header = True

    print(f"{name:<20} {wall_time_ms:15.2f} {cpu_time_ms:15.2f} {mem_used_kb:20.2f}")

    return result


if __name__ == '__main__':
    arguments = sys.argv

    if len(arguments) < 3:
        short_name = os.path.splitext(os.path.basename(arguments[0]))[0]
        print(f"\nUsage:  {short_name} {USAGE}")
        sys.exit(0)

    remaining_args = arguments[3:]
    try:
        input_file = CompressorBitio.BitFile.open_input_bit_file(arguments[1], pacifier=True)
        with input_file, open(arguments[2], 'wb') as output_file:
            print(f"\nDecompressing {arguments[1]} to {arguments[2]}")
            print(f"Using {COMPRESSION_NAME}\n")

            track_performance("ExpandFile", expand_file, input_file, output_file, len(remaining_args), remaining_args)
        print(f"\nBits read:               {input_file.bits_read}")
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        sys.exit(1)
    except Exception as e:
        print(f"An error occurred: {e}")
        sys.exit(1)
