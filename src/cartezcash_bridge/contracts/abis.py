"""Minimal ABIs of the Cartesi rollups v1 contracts used by the bridge."""

ETHER_PORTAL_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_dapp", "type": "address"},
            {"internalType": "bytes", "name": "_execLayerData", "type": "bytes"},
        ],
        "name": "depositEther",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]

DAPP_ADDRESS_RELAY_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_dapp", "type": "address"},
        ],
        "name": "relayDAppAddress",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

INPUT_BOX_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_dapp", "type": "address"},
            {"internalType": "bytes", "name": "_input", "type": "bytes"},
        ],
        "name": "addInput",
        "outputs": [{"internalType": "bytes32", "name": "", "type": "bytes32"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

_OUTPUT_VALIDITY_PROOF = {
    "components": [
        {"internalType": "uint64", "name": "inputIndexWithinEpoch", "type": "uint64"},
        {"internalType": "uint64", "name": "outputIndexWithinInput", "type": "uint64"},
        {"internalType": "bytes32", "name": "outputHashesRootHash", "type": "bytes32"},
        {"internalType": "bytes32", "name": "vouchersEpochRootHash", "type": "bytes32"},
        {"internalType": "bytes32", "name": "noticesEpochRootHash", "type": "bytes32"},
        {"internalType": "bytes32", "name": "machineStateHash", "type": "bytes32"},
        {"internalType": "bytes32[]", "name": "outputHashInOutputHashesSiblings", "type": "bytes32[]"},
        {"internalType": "bytes32[]", "name": "outputHashesInEpochSiblings", "type": "bytes32[]"},
    ],
    "internalType": "struct OutputValidityProof",
    "name": "validity",
    "type": "tuple",
}

CARTESI_DAPP_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "_destination", "type": "address"},
            {"internalType": "bytes", "name": "_payload", "type": "bytes"},
            {
                "components": [
                    _OUTPUT_VALIDITY_PROOF,
                    {"internalType": "bytes", "name": "context", "type": "bytes"},
                ],
                "internalType": "struct Proof",
                "name": "_proof",
                "type": "tuple",
            },
        ],
        "name": "executeVoucher",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "_inputIndex", "type": "uint256"},
            {"internalType": "uint256", "name": "_outputIndexWithinInput", "type": "uint256"},
        ],
        "name": "wasVoucherExecuted",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
]

# Field order of OutputValidityProof, used to turn a GraphQL proof into a tuple
OUTPUT_VALIDITY_FIELDS = [c["name"] for c in _OUTPUT_VALIDITY_PROOF["components"]]
