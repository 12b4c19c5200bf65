[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osdemos"
version = "0.1.0"
description = "Small runnable demonstrations of operating-system concepts: processes, lottery scheduling, threads, locks, condition variables, semaphores, a memory-mapped stack and UDP messaging."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "operating systems",
    "education",
    "fork",
    "threads",
    "semaphores",
    "condition variables",
    "lottery scheduling",
    "concurrency",
    "mmap",
    "udp",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Operating System",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
osdemos-zemaphore = "osdemos.zemaphore:main"
osdemos-lottery = "osdemos.lottery:main"
osdemos-pstack = "osdemos.pstack:main"
osdemos-cas = "osdemos.cas:main"
osdemos-processes = "osdemos.processes:main"
osdemos-intro = "osdemos.intro:main"
osdemos-udp = "osdemos.udp:main"
osdemos-threads = "osdemos.threads_basic:main"
osdemos-threads-bugs = "osdemos.threads_bugs:main"
osdemos-threads-cv = "osdemos.threads_cv:main"
osdemos-dining = "osdemos.dining:main"
osdemos-threads-sema = "osdemos.threads_sema:main"

[tool.hatch.build.targets.wheel]
packages = ["osdemos"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
