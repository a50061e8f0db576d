"""Column types of the ClickHouse native format and the factory that builds them from type names."""