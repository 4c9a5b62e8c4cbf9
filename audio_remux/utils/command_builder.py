"""
A small builder for ffmpeg invocations.

Arguments are collected into typed groups (global flags, inputs, output options,
stream maps, codec options, caller-supplied extras) and only flattened into a
list by `build()`. This keeps ordering rules, such as "the skeleton is always
the last input", checkable on the builder instead of on a flat string.
"""
from pathlib import Path
from typing import List, Sequence, Tuple, Union

PathLike = Union[str, Path]


class FFmpegCommand:
    """
    Accumulates the argument groups of one ffmpeg command.

    The built command is laid out as:

        <executable> <global args> [<input options> -i <input>]... <output options>
        [-map <spec>]... <codec options> <extra args> <output>
    """

    def __init__(self, executable: str = "ffmpeg", global_args: Sequence[str] = ()):
        self.executable = executable
        self.global_args: List[str] = list(global_args)
        self.inputs: List[Tuple[List[str], str]] = []
        self.output_options: List[str] = []
        self.maps: List[str] = []
        self.codec_options: List[str] = []
        self.extra_args: List[str] = []

    def add_input(self, path: PathLike, *options: str) -> int:
        """Appends an input and returns its ffmpeg input index."""
        self.inputs.append((list(options), str(path)))
        return len(self.inputs) - 1

    def add_output_options(self, *options: str) -> "FFmpegCommand":
        self.output_options.extend(options)
        return self

    def add_map(self, spec: str) -> "FFmpegCommand":
        self.maps.append(spec)
        return self

    def add_codec_options(self, *options: str) -> "FFmpegCommand":
        self.codec_options.extend(options)
        return self

    def add_extra_args(self, args: Sequence[str]) -> "FFmpegCommand":
        self.extra_args.extend(str(arg) for arg in args)
        return self

    def build(self, output: PathLike) -> List[str]:
        cmd = [self.executable, *self.global_args]
        for options, path in self.inputs:
            cmd.extend(options)
            cmd.extend(["-i", path])
        cmd.extend(self.output_options)
        for spec in self.maps:
            cmd.extend(["-map", spec])
        cmd.extend(self.codec_options)
        cmd.extend(self.extra_args)
        cmd.append(str(output))
        return cmd
