"""
Shared test fixtures.

The sample firmware has a 16 KiB bootloader area, a FLASH region right
after it, 64 KiB of RAM and an empty NOINIT region:

    BOOT    0x08000000  0x4000
    FLASH   0x08004000  0x3C000   .isr_vector 392, .text 10240, .rodata 1024
    RAM     0x20000000  0x10000   .data 256, .bss 1024, ._user_heap_stack 1536
    NOINIT  0x20010000  0
"""

from __future__ import annotations

import textwrap

import pytest

from pretty_size.memory import Region, Section

SAMPLE_SCRIPT = textwrap.dedent(
    """\
    /* Generated for an STM32F4 part */
    ENTRY(Reset_Handler)

    MEMORY
    {
      BOOT (rx)   : ORIGIN = 0x08000000, LENGTH = 0x4000
      FLASH (rx)  : ORIGIN = 0x08004000, LENGTH = 0x3C000
      RAM (xrw)   : ORIGIN = 0x20000000, LENGTH = 0x10000
      NOINIT (rw) : ORIGIN = 0x20010000, LENGTH = 0
    }

    SECTIONS
    {
      .isr_vector : { KEEP(*(.isr_vector)) } >FLASH
      .text : { *(.text*) } >FLASH
    }
    """
)

SYSV_LISTING = textwrap.dedent(
    """\
    firmware.elf  :
    section                size        addr
    .isr_vector             392   134234112
    .text                 10240   134234504
    .rodata                1024   134244744
    .data                   256   536870912
    .bss                   1024   536871168
    ._user_heap_stack      1536   536872192
    .ARM.attributes          48           0
    .comment                121           0
    .debug_info            5000           0
    Total                 19641
    """
)

OBJDUMP_LISTING = textwrap.dedent(
    """\

    firmware.elf:     file format elf32-littlearm

    Sections:
    Idx Name          Size      VMA       LMA       File off  Algn
      0 .isr_vector   00000188  08004000  08004000  00004000  2**0
                      CONTENTS, ALLOC, LOAD, READONLY, DATA
      1 .text         00002800  08004188  08004188  00004188  2**3
                      CONTENTS, ALLOC, LOAD, READONLY, CODE
      2 .rodata       00000400  08006988  08006988  00006988  2**2
                      CONTENTS, ALLOC, LOAD, READONLY, DATA
      3 .data         00000100  20000000  08006d88  00010000  2**2
                      CONTENTS, ALLOC, LOAD, DATA
      4 .bss          00000400  20000100  20000100  00010100  2**2
                      ALLOC
      5 ._user_heap_stack 00000600  20000500  20000500  00010100  2**0
                      ALLOC
      6 .comment      00000079  00000000  00000000  00010100  2**0
                      CONTENTS, READONLY
    """
)


@pytest.fixture
def sample_script() -> str:
    return SAMPLE_SCRIPT


@pytest.fixture
def sysv_listing() -> str:
    return SYSV_LISTING


@pytest.fixture
def objdump_listing() -> str:
    return OBJDUMP_LISTING


@pytest.fixture
def regions() -> list[Region]:
    return [
        Region("BOOT", 0x08000000, 0x4000),
        Region("FLASH", 0x08004000, 0x3C000),
        Region("RAM", 0x20000000, 0x10000),
    ]


@pytest.fixture
def sections() -> list[Section]:
    return [
        Section(".isr_vector", 0x08004000, 392),
        Section(".text", 0x08004188, 10240),
        Section(".rodata", 0x08006988, 1024),
        Section(".data", 0x20000000, 256),
        Section(".bss", 0x20000100, 1024),
    ]
