from voice_relay.server import main

main()
