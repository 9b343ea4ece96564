"""Domain layer for taskledger.

Pure domain code: value objects, aggregates, domain events, the
specification engine and the repository contracts. Nothing in this
package performs I/O.
"""
