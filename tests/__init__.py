"""
Idle Finance Test Suite
=======================

Test Organization
-----------------
- tests/unit/          : Fast unit tests (the economy core is pure)
- tests/unit/domain/   : Domain model invariants and save shape

Testing Philosophy
------------------
- Test business rules in isolation with hand-checkable numbers
- Seeded randomized cases (``property`` marker) for algebraic invariants
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
