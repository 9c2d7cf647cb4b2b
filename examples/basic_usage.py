#!/usr/bin/env python3
"""
Basic usage examples for the DynamoDB client.

Run against DynamoDB Local (``docker run -p 8000:8000 amazon/dynamodb-local``):
1. Create a table and wait for it to become ACTIVE
2. Write, update and delete items
3. Fetch a batch of items and scan with a filter
4. Clean up
"""

from dynamodb_client import AttributeValue, DynamoDBClient, DynamoDBConfig, ScanCondition


def main():
    """Demonstrate the table, item and scan operations."""

    # 1. Configure and create the client
    print("1. Setting up DynamoDB configuration...")
    config = DynamoDBConfig.for_local_development()
    # config = DynamoDBConfig.from_env()  # Uses environment variables
    client = DynamoDBClient(config)

    # 2. Create a table with a hash + range key
    print("2. Creating table...")
    client.create_table(
        table='events',
        fields=['user', 'S', 'ts', 'N'],
        primary=['user', 'HASH', 'ts', 'RANGE'],
    )
    table = client.wait_for_table('events')
    print(f"   Table status: {table['TableStatus']}")

    # 3. Write items; numbers are sent as N, text as S, lists as sets
    print("3. Writing items...")
    for ts in range(1, 6):
        client.put_item('events', {
            'user': 'alice',
            'ts': ts,
            'kind': 'click' if ts % 2 else 'view',
            'tags': ['web', 'beta'],
            'ref': AttributeValue.number('1000'),
        })
    client.update_item('events', item={'user': 'alice', 'ts': 1}, fields={'kind': 'purchase'})
    client.delete_item('events', item={'user': 'alice', 'ts': 5})

    # 4. Batch get by key
    print("4. Batch get...")
    client.batch_get_item(
        lambda table_name, item: print(f"   {table_name}: {item}"),
        items={'events': [{'user': 'alice', 'ts': 1}, {'user': 'alice', 'ts': 2}]},
    )

    # 5. Scan with a filter, two items per page
    print("5. Scan for clicks...")
    count = client.scan(
        lambda item: print(f"   {item}"),
        table='events',
        limit=2,
        filter=[ScanCondition(field='kind', value='click')],
    )
    print(f"   {count} matching item(s)")

    # 6. List tables and clean up
    print(f"6. Tables: {client.list_tables()}")
    client.delete_table('events')


if __name__ == "__main__":
    main()
