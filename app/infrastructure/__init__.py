"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports defined in
the domain layer: the SQL account store and its engine factory.
"""
