# Infrastructure clients
from clients.valkey_client import ValkeyClient
from clients.store import KeyValueStore, StoreHandle
from clients.connectivity import ConnectivityMonitor, ConnectivityStatus
