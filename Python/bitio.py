#Bradford Arrington 2025
import io
import sys
from typing import BinaryIO


class CompressorBitio:
    PACIFIER_COUNT = 2047

    class BitFile:
        def __init__(self, stream: BinaryIO, input_mode: bool, pacifier: bool = False):
            self.is_input = input_mode
            self.file_stream: BinaryIO = stream
            self.rack: int = 0
            self.mask: int = 0x80
            self.pacifier = pacifier
            self.pacifier_counter: int = 0
            self.bits_read: int = 0
            self.bits_written: int = 0
            self.closed = False

        @staticmethod
        def open_output_bit_file(name: str, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(open(name, "wb"), False, pacifier)

        @staticmethod
        def open_input_bit_file(name: str, pacifier: bool = False) -> 'CompressorBitio.BitFile':
            return CompressorBitio.BitFile(open(name, "rb"), True, pacifier)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_value, traceback):
            self.close_bit_file()

        def seekable(self) -> bool:
            return self.is_input and self.file_stream.seekable()

        def reset(self):
            """Rewind an input bit file to the first bit of its stream."""
            if not self.seekable():
                raise io.UnsupportedOperation("bit file cannot be rewound")
            self.file_stream.seek(0)
            self.rack = 0
            self.mask = 0x80
            self.bits_read = 0

        def close_bit_file(self):
            if self.closed:
                return
            self.closed = True
            try:
                if not self.is_input and self.mask != 0x80:
                    self.file_stream.write(bytes([self.rack]))
                if not self.is_input:
                    self.file_stream.flush()
            finally:
                self.file_stream.close()

        def _pacify(self):
            self.pacifier_counter += 1
            if self.pacifier and (self.pacifier_counter & CompressorBitio.PACIFIER_COUNT) == 0:
                sys.stdout.write(".")
                sys.stdout.flush()

        def _next_rack(self):
            read = self.file_stream.read(1)
            if not read:
                raise EOFError("end of bit file reached")
            self.rack = read[0]
            self._pacify()

        def output_bit(self, bit: int):
            if bit != 0:
                self.rack |= self.mask
            self.mask >>= 1
            self.bits_written += 1
            if self.mask == 0:
                self.file_stream.write(bytes([self.rack]))
                self._pacify()
                self.rack = 0
                self.mask = 0x80

        def output_bits(self, code: int, count: int):
            """Write the low ``count`` bits of ``code``, most significant first."""
            mask_code: int = 1 << (count - 1) if count > 0 else 0
            while mask_code != 0:
                self.output_bit(mask_code & code)
                mask_code >>= 1

        def input_bit(self) -> int:
            if self.mask == 0x80:
                self._next_rack()
            value = self.rack & self.mask
            self.mask >>= 1
            if self.mask == 0:
                self.mask = 0x80
            self.bits_read += 1
            return 1 if value != 0 else 0

        def input_bits(self, bit_count: int) -> int:
            """Read ``bit_count`` bits as an unsigned integer.

            Raises EOFError when the stream runs out before the field is
            complete.
            """
            mask_code: int = 1 << (bit_count - 1) if bit_count > 0 else 0
            return_value: int = 0
            while mask_code != 0:
                if self.input_bit():
                    return_value |= mask_code
                mask_code >>= 1
            return return_value
