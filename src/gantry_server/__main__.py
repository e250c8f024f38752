from gantry_server.boot import main

main()
