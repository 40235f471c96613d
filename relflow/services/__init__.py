# SPDX-License-Identifier: MIT
"""Application services.

Services implement the release workflow, coordinating between the domain
types (core/) and the collaborators that touch the outside world (git/, gh,
the build toolchain).
"""
