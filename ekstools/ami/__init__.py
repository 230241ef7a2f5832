"""Node image lookup: the built-in image table, EC2 image queries and resolvers."""